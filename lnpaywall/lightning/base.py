"""Payment verification protocol."""

from typing import Protocol


class PaymentVerifier(Protocol):
    """Creates invoices and reports whether they have been paid.

    Implementations are shared between concurrent requests and must be
    thread-safe.
    """

    def issue_charge(self, amount: int, memo: str) -> str:
        """Create an invoice and return its payment request.

        Raises:
            InvalidAmount: If ``amount`` is not positive
            VerificationUnavailable: If the node cannot be reached
        """
        ...

    def is_settled(self, proof: str) -> bool:
        """Check whether the invoice matching ``proof`` has been paid.

        Returns:
            False if the invoice exists but is not paid yet

        Raises:
            ProofMalformed: If the proof does not decode
            ChargeNotFound: If the node has no matching invoice
            VerificationUnavailable: If the node cannot be reached
        """
        ...
