"""
Type definitions for the paywall.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ChargeConfig:
    """Price of a protected resource.

    Attributes:
        amount: Invoice value in satoshis
        memo: Description shown to the payer
    """

    amount: int
    memo: str = ""


class OutcomeKind(str, Enum):
    AUTHORIZED = "authorized"
    CHALLENGE_REQUIRED = "challenge_required"
    REJECTED = "rejected"
    SERVICE_ERROR = "service_error"


class RejectReason(str, Enum):
    """Caller mistakes, reported back as reason codes."""

    MALFORMED_PROOF = "malformed_proof"
    UNKNOWN_CHARGE = "unknown_charge"
    ALREADY_USED = "already_used"
    NOT_SETTLED = "not_settled"


REJECT_MESSAGES = {
    RejectReason.MALFORMED_PROOF: "The preimage is not a valid base64 encoded 32 byte value",
    RejectReason.UNKNOWN_CHARGE: "No invoice exists for the given preimage",
    RejectReason.ALREADY_USED: "The preimage has already been used",
    RejectReason.NOT_SETTLED: "The invoice for the given preimage is not settled",
}


class Outcome:
    """Result of authorizing one request."""

    def __init__(
        self,
        kind: OutcomeKind,
        payment_request: Optional[str] = None,
        reason: Optional[RejectReason] = None,
        payment_hash: Optional[str] = None,
    ):
        self.kind = kind
        self.payment_request = payment_request
        self.reason = reason
        self.payment_hash = payment_hash

    @classmethod
    def authorized(cls, payment_hash: str) -> "Outcome":
        return cls(OutcomeKind.AUTHORIZED, payment_hash=payment_hash)

    @classmethod
    def challenge(cls, payment_request: str) -> "Outcome":
        return cls(OutcomeKind.CHALLENGE_REQUIRED, payment_request=payment_request)

    @classmethod
    def rejected(cls, reason: RejectReason, payment_hash: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.REJECTED, reason=reason, payment_hash=payment_hash)

    @classmethod
    def service_error(cls, payment_hash: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.SERVICE_ERROR, payment_hash=payment_hash)

    @property
    def is_authorized(self) -> bool:
        return self.kind is OutcomeKind.AUTHORIZED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and debugging."""
        result: Dict[str, Any] = {"kind": self.kind.value}
        if self.payment_request:
            result["paymentRequest"] = self.payment_request
        if self.reason:
            result["reason"] = self.reason.value
        if self.payment_hash:
            result["paymentHash"] = self.payment_hash
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Outcome):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Outcome({self.to_dict()})"


# Type alias for routes map, keyed like "GET /api/data"
RoutesMap = Dict[str, ChargeConfig]
