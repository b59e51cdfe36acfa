"""
Redaction helpers for personally identifying values.

Used wherever a phone number, email address or patient identifier could reach
a log line. Every function is pure and idempotent: masking an already-masked
value returns it unchanged.
"""

from typing import Any, Optional

MASK_CHAR = "*"
SHORT_MASK = "****"
EMAIL_PLACEHOLDER = "*****@*****.***"

# Request fields that carry identifying values, mapped to the rule that masks them
PHONE_FIELDS = ("phoneNumber", "phone", "recipient", "to")
EMAIL_FIELDS = ("email",)
ID_FIELDS = ("patientId",)


def mask_phone(phone: Optional[str]) -> str:
    """Keep the first two and last two characters of a phone number."""
    if not phone or len(phone) < 4:
        return SHORT_MASK
    return phone[:2] + MASK_CHAR * (len(phone) - 4) + phone[-2:]


def mask_email(email: Optional[str]) -> str:
    """Keep at most two characters of the local part plus the domain."""
    if not email or "@" not in email or email == EMAIL_PLACEHOLDER:
        return EMAIL_PLACEHOLDER
    local, domain = email.split("@", 1)
    visible = local[:2].rstrip(MASK_CHAR)
    return f"{visible}***@{domain}"


def mask_id(value: Optional[str]) -> str:
    """Keep the first three and last three characters of an opaque id."""
    if not value or len(value) < 6:
        return SHORT_MASK
    return value[:3] + MASK_CHAR * (len(value) - 6) + value[-3:]


def mask_sensitive_data(data: Optional[dict[str, Any]]) -> dict[str, Any]:
    """
    Return a shallow copy of a request payload with identifying fields masked.

    Args:
        data: Parameters about to be logged

    Returns:
        Copy of ``data`` safe for logging
    """
    masked = dict(data or {})
    for key, value in masked.items():
        if not isinstance(value, str):
            continue
        if key in PHONE_FIELDS:
            masked[key] = mask_phone(value)
        elif key in EMAIL_FIELDS:
            masked[key] = mask_email(value)
        elif key in ID_FIELDS:
            masked[key] = mask_id(value)
    return masked


def scrub_text(text: str, data: Optional[dict[str, Any]]) -> str:
    """Replace any raw identifying value from ``data`` that appears in ``text``."""
    if not text or not data:
        return text
    masked = mask_sensitive_data(data)
    for key, value in data.items():
        if isinstance(value, str) and value and masked.get(key) != value:
            text = text.replace(value, masked[key])
    return text
