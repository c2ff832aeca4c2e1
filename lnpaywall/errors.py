"""
Error types raised by the payment and storage backends.

The authorizer catches every one of these at its boundary and turns it into an
outcome, so transport adapters never see them.
"""


class PaywallError(Exception):
    """Base error for the paywall."""


class ConfigError(PaywallError):
    """Raised when the supplied configuration is invalid."""


class ProofMalformed(PaywallError):
    """The proof is not valid base64 or does not decode to a 32 byte preimage."""


class ChargeNotFound(PaywallError):
    """The node has no invoice for the payment hash derived from the proof."""


class InvalidAmount(PaywallError):
    """A charge was requested for an amount that is zero or negative."""


class VerificationUnavailable(PaywallError):
    """The Lightning node could not be reached or refused the request."""


class StorageUnavailable(PaywallError):
    """The replay store backend failed."""
