"""
Public facade for the Lightning paywall package.

Re-exports the pieces integrators need so they can ``from lnpaywall import ...``
without navigating the package.
"""

from lnpaywall.config import LNDOptions, PaywallSettings
from lnpaywall.errors import (
    ChargeNotFound,
    ConfigError,
    InvalidAmount,
    PaywallError,
    ProofMalformed,
    StorageUnavailable,
    VerificationUnavailable,
)
from lnpaywall.lightning import LNDClient, PaymentVerifier
from lnpaywall.paywall import (
    Authorizer,
    ChargeConfig,
    Outcome,
    OutcomeKind,
    Paywall,
    PaywallMiddleware,
    RejectReason,
    paywall,
)
from lnpaywall.storage import (
    MemoryReplayStore,
    ReplayStore,
    SQLiteReplayStore,
    create_store,
)

__version__ = "0.1.0"

__all__ = (
    "Authorizer",
    "ChargeConfig",
    "ChargeNotFound",
    "ConfigError",
    "InvalidAmount",
    "LNDClient",
    "LNDOptions",
    "MemoryReplayStore",
    "Outcome",
    "OutcomeKind",
    "PaymentVerifier",
    "Paywall",
    "PaywallError",
    "PaywallMiddleware",
    "PaywallSettings",
    "ProofMalformed",
    "RejectReason",
    "ReplayStore",
    "SQLiteReplayStore",
    "StorageUnavailable",
    "VerificationUnavailable",
    "create_store",
    "paywall",
)
