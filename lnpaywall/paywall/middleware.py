"""
Paywall middleware for FastAPI/Starlette

This middleware protects API routes behind Lightning payments. Requests without
a preimage receive a fresh invoice, requests with a valid and unused preimage
for a settled invoice are forwarded once.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from lnpaywall.config import DEFAULT_HEADER
from lnpaywall.paywall.authorizer import Authorizer
from lnpaywall.paywall.types import (
    REJECT_MESSAGES,
    ChargeConfig,
    Outcome,
    OutcomeKind,
    RoutesMap,
)

logger = logging.getLogger(__name__)

STATUS_FOR_OUTCOME = {
    OutcomeKind.CHALLENGE_REQUIRED: 402,
    OutcomeKind.REJECTED: 400,
    OutcomeKind.SERVICE_ERROR: 500,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def response_body(outcome: Outcome, charge: ChargeConfig) -> Dict[str, Any]:
    """Build the JSON body for a request that is not let through.

    Args:
        outcome: A non-authorized outcome
        charge: Price of the requested resource

    Returns:
        Body dictionary. Backend failures only carry a generic message.
    """
    if outcome.kind is OutcomeKind.CHALLENGE_REQUIRED:
        return {
            "paymentRequest": outcome.payment_request,
            "amount": charge.amount,
            "memo": charge.memo,
        }
    if outcome.kind is OutcomeKind.REJECTED:
        return {
            "error": outcome.reason.value,
            "message": REJECT_MESSAGES[outcome.reason],
        }
    return {"message": INTERNAL_ERROR_MESSAGE}


def outcome_response(outcome: Outcome, charge: ChargeConfig) -> JSONResponse:
    """Map a non-authorized outcome to an HTTP response."""
    return JSONResponse(
        status_code=STATUS_FOR_OUTCOME[outcome.kind],
        content=response_body(outcome, charge),
    )


class PaywallMiddleware(BaseHTTPMiddleware):
    """Middleware requiring a Lightning payment for protected routes."""

    def __init__(
        self,
        app: Any,
        authorizer: Authorizer,
        routes: RoutesMap,
        header_name: str = DEFAULT_HEADER,
        skip_paths: Optional[list[str]] = None,
    ):
        """Initialize the paywall middleware.

        Args:
            app: The ASGI application
            authorizer: Shared authorizer holding the node client and replay store
            routes: Map of route keys to prices (e.g., {"GET /api/data": ChargeConfig(10, "data")})
            header_name: Request header carrying the base64 preimage
            skip_paths: Paths that never require payment (e.g., ["/health"])
        """
        super().__init__(app)
        self.authorizer = authorizer
        self.routes = routes
        self.header_name = header_name
        self.skip_paths = skip_paths or []

    def _should_skip_payment(self, path: str) -> bool:
        for skip_path in self.skip_paths:
            if path == skip_path or path.startswith(skip_path.rstrip("/") + "/"):
                return True
        return False

    def _get_charge(self, method: str, path: str) -> Optional[ChargeConfig]:
        """Get the price for the given method and path.

        Args:
            method: HTTP method
            path: Request path

        Returns:
            ChargeConfig if the route is protected, None otherwise
        """
        # Normalize path (remove trailing slash, ensure leading slash)
        normalized_path = path.rstrip("/") or "/"
        if not normalized_path.startswith("/"):
            normalized_path = "/" + normalized_path

        route_key = f"{method.upper()} {normalized_path}"
        if route_key in self.routes:
            return self.routes[route_key]

        route_key_slash = f"{method.upper()} {normalized_path}/"
        if route_key_slash in self.routes:
            return self.routes[route_key_slash]

        return None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through the paywall.

        Args:
            request: FastAPI/Starlette request
            call_next: Next middleware/handler in chain

        Returns:
            Response (402/400/500, or the handler's response)
        """
        path = request.url.path
        method = request.method

        if self._should_skip_payment(path):
            return await call_next(request)

        charge = self._get_charge(method, path)
        if charge is None:
            return await call_next(request)

        logger.debug(f"[paywall] Route protected: {method} {path}, price: {charge.amount} sat")

        proof = request.headers.get(self.header_name)
        outcome = await run_in_threadpool(self.authorizer.authorize, proof, charge)

        if outcome.is_authorized:
            return await call_next(request)

        logger.info(f"[paywall] {method} {path} -> {outcome.to_dict()}")
        return outcome_response(outcome, charge)


def paywall(
    authorizer: Authorizer,
    routes: RoutesMap,
    header_name: str = DEFAULT_HEADER,
    skip_paths: Optional[list[str]] = None,
) -> type[BaseHTTPMiddleware]:
    """Create a paywall middleware class bound to the given settings.

    Example:
        ```python
        app.add_middleware(
            paywall(authorizer, {"GET /api/data": ChargeConfig(100, "api-call")})
        )
        ```
    """
    _authorizer = authorizer
    _routes = routes
    _header_name = header_name
    _skip_paths = skip_paths

    class BoundPaywallMiddleware(PaywallMiddleware):
        def __init__(self, app: Any, **kwargs):
            super().__init__(
                app=app,
                authorizer=_authorizer,
                routes=_routes,
                header_name=_header_name,
                skip_paths=_skip_paths,
            )

    return BoundPaywallMiddleware
