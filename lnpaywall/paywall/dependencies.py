"""
FastAPI dependency guarding single routes.

Usage:
    guard = Paywall(authorizer)

    @app.get("/api/data", dependencies=[Depends(guard.require(ChargeConfig(10, "data")))])
    async def data():
        ...
"""

from typing import Callable, Optional

from fastapi import HTTPException, Request
from starlette.concurrency import run_in_threadpool

from lnpaywall.config import DEFAULT_HEADER
from lnpaywall.paywall.authorizer import Authorizer
from lnpaywall.paywall.middleware import STATUS_FOR_OUTCOME, response_body
from lnpaywall.paywall.types import ChargeConfig, Outcome


class Paywall:
    """Builds per-route dependencies sharing one authorizer."""

    def __init__(self, authorizer: Authorizer, header_name: str = DEFAULT_HEADER):
        self.authorizer = authorizer
        self.header_name = header_name

    def require(self, charge: ChargeConfig) -> Callable:
        """Return a dependency that only lets paid requests through.

        The dependency resolves to the authorized :class:`Outcome`; any other
        outcome raises an ``HTTPException`` whose detail is the response body.
        """

        async def dependency(request: Request) -> Outcome:
            proof: Optional[str] = request.headers.get(self.header_name)
            outcome = await run_in_threadpool(self.authorizer.authorize, proof, charge)
            if not outcome.is_authorized:
                raise HTTPException(
                    status_code=STATUS_FOR_OUTCOME[outcome.kind],
                    detail=response_body(outcome, charge),
                )
            return outcome

        return dependency
