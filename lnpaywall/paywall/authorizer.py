"""
Authorization decision procedure.

Given the preimage sent with a request (or none) and the price of the resource,
decide whether to issue an invoice, reject the request, or let it through. The
procedure is independent of any web framework: adapters pass the header value
in and map the returned :class:`Outcome` to a response.
"""

import logging
from typing import Optional

from lnpaywall.errors import (
    ChargeNotFound,
    PaywallError,
    ProofMalformed,
    StorageUnavailable,
)
from lnpaywall.lightning.base import PaymentVerifier
from lnpaywall.lightning.proof import replay_key
from lnpaywall.paywall.types import ChargeConfig, Outcome, RejectReason
from lnpaywall.storage.base import ReplayStore

logger = logging.getLogger(__name__)


class Authorizer:
    """Orchestrates a payment verifier and a replay store.

    Holds no state of its own, so one instance can serve any number of
    concurrent requests as long as both collaborators are thread-safe.
    """

    def __init__(self, verifier: PaymentVerifier, store: ReplayStore):
        """Initialize the authorizer.

        Args:
            verifier: Creates invoices and checks their settlement
            store: Records spent preimages
        """
        self.verifier = verifier
        self.store = store

    def authorize(self, proof: Optional[str], charge: ChargeConfig) -> Outcome:
        """Decide what to do with one request.

        Args:
            proof: Base64 preimage from the request, None if absent
            charge: Price of the protected resource

        Returns:
            The outcome. Never raises for backend failures.
        """
        if not proof:
            return self._challenge(charge)

        try:
            key = replay_key(proof)
        except ProofMalformed as e:
            logger.info(f"[paywall] Rejecting malformed preimage: {e}")
            return Outcome.rejected(RejectReason.MALFORMED_PROOF)

        # Spent preimages are rejected without a round trip to the node
        try:
            if self.store.was_used(key):
                logger.info(f"[paywall] Preimage for hash {key} was already used")
                return Outcome.rejected(RejectReason.ALREADY_USED, payment_hash=key)
        except StorageUnavailable as e:
            logger.error(f"[paywall] Replay check failed for hash {key}: {e}", exc_info=True)
            return Outcome.service_error(payment_hash=key)

        try:
            settled = self.verifier.is_settled(proof)
        except ProofMalformed as e:
            logger.info(f"[paywall] Node rejected preimage as malformed: {e}")
            return Outcome.rejected(RejectReason.MALFORMED_PROOF, payment_hash=key)
        except ChargeNotFound:
            logger.info(f"[paywall] No invoice found for hash {key}")
            return Outcome.rejected(RejectReason.UNKNOWN_CHARGE, payment_hash=key)
        except PaywallError as e:
            logger.error(f"[paywall] Settlement check failed for hash {key}: {e}", exc_info=True)
            return Outcome.service_error(payment_hash=key)

        if not settled:
            logger.info(f"[paywall] Invoice for hash {key} is not settled")
            return Outcome.rejected(RejectReason.NOT_SETTLED, payment_hash=key)

        # The claim is the commit point: a concurrent request with the same
        # preimage may have passed the fast check too, only one claim wins.
        try:
            already_claimed = self.store.try_claim(key)
        except StorageUnavailable as e:
            logger.error(f"[paywall] Could not record preimage for hash {key}: {e}", exc_info=True)
            return Outcome.service_error(payment_hash=key)

        if already_claimed:
            logger.warning(f"[paywall] Concurrent replay of preimage for hash {key}")
            return Outcome.rejected(RejectReason.ALREADY_USED, payment_hash=key)

        logger.info(f"[paywall] Authorized request paid with hash {key}")
        return Outcome.authorized(payment_hash=key)

    def _challenge(self, charge: ChargeConfig) -> Outcome:
        try:
            payment_request = self.verifier.issue_charge(charge.amount, charge.memo)
        except PaywallError as e:
            logger.error(f"[paywall] Failed to create invoice: {e}", exc_info=True)
            return Outcome.service_error()
        logger.info(f"[paywall] Issued invoice for {charge.amount} sat")
        return Outcome.challenge(payment_request)
