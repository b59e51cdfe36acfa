"""Shared validation utilities"""

import re
from datetime import date
from typing import Optional


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164 format.

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number in E.164 format (+XXXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    # Remove all non-digit characters
    digits = re.sub(r"\D", "", phone)

    # Bare 10-digit Indian mobile numbers get the +91 country code
    if len(digits) == 10 and digits[0] in "6789" and not phone.strip().startswith("+"):
        digits = f"91{digits}"

    # E.164 allows at most 15 digits
    if len(digits) < 8 or len(digits) > 15:
        raise ValueError("Phone number must contain 8 to 15 digits including country code")

    return f"+{digits}"


def validate_iso_date(value: Optional[str]) -> Optional[str]:
    """
    Validate an ISO ``YYYY-MM-DD`` date string.

    Raises:
        ValueError: If the string is not a calendar date
    """
    if not value:
        return value
    try:
        date.fromisoformat(value[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date: {value}") from e
    return value
