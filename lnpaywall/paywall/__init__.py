"""
Lightning Paywall Package

This package provides the authorization procedure deciding whether a request
has been paid for, plus FastAPI/Starlette adapters around it.
"""

from lnpaywall.paywall.authorizer import Authorizer
from lnpaywall.paywall.dependencies import Paywall
from lnpaywall.paywall.middleware import PaywallMiddleware, outcome_response, paywall
from lnpaywall.paywall.types import (
    ChargeConfig,
    Outcome,
    OutcomeKind,
    RejectReason,
    RoutesMap,
)

__all__ = [
    "Authorizer",
    "Paywall",
    "PaywallMiddleware",
    "paywall",
    "outcome_response",
    "ChargeConfig",
    "Outcome",
    "OutcomeKind",
    "RejectReason",
    "RoutesMap",
]
