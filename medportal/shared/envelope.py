"""Result type returned by every domain service operation"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

FALLBACK_SUFFIX = " (fallback mode)"


class ResultKind(str, Enum):
    """Where a service result came from."""

    OK = "ok"  # authoritative answer from the gateway
    FALLBACK = "fallback"  # synthesized locally while the gateway was unavailable
    ERR = "err"  # fallback could not satisfy the request


@dataclass(frozen=True)
class ServiceResult:
    """
    Tagged outcome of a domain operation.

    Routes never inspect gateway errors; they render this into the uniform
    envelope ``{success, message, fallbackUsed, ...fields}``.
    """

    kind: ResultKind
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **data: Any) -> "ServiceResult":
        return cls(ResultKind.OK, message, data)

    @classmethod
    def fallback(cls, message: str, **data: Any) -> "ServiceResult":
        if not message.endswith(FALLBACK_SUFFIX):
            message = f"{message}{FALLBACK_SUFFIX}"
        return cls(ResultKind.FALLBACK, message, data)

    @classmethod
    def err(cls, message: str, **data: Any) -> "ServiceResult":
        return cls(ResultKind.ERR, message, data)

    @property
    def success(self) -> bool:
        return self.kind is not ResultKind.ERR

    @property
    def fallback_used(self) -> bool:
        return self.kind is not ResultKind.OK

    def to_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"success": self.success, "message": self.message}
        envelope.update(self.data)
        envelope["fallbackUsed"] = self.fallback_used
        return envelope
