"""
Demo FastAPI application.

Exposes an unprotected health check and one paid endpoint. The lnd client and
the replay store are created once at startup, shared by every request and
closed on shutdown.

Run with:
    uvicorn lnpaywall.main:create_app --factory --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from lnpaywall.config import PaywallSettings
from lnpaywall.lightning.base import PaymentVerifier
from lnpaywall.lightning.lnd import LNDClient
from lnpaywall.paywall import Authorizer, ChargeConfig, paywall
from lnpaywall.storage import ReplayStore, create_store

API_VERSION = "0.1.0"
SERVICE_NAME = "lnpaywall-demo"
PAID_ROUTE = "/api/ping"
HEALTH_ROUTE = "/health"


def create_app(
    settings: Optional[PaywallSettings] = None,
    verifier: Optional[PaymentVerifier] = None,
    store: Optional[ReplayStore] = None,
) -> FastAPI:
    """Create and configure the demo application.

    Args:
        settings: Settings, loaded from the environment when omitted
        verifier: Payment verifier, an ``LNDClient`` is built from settings when omitted
        store: Replay store, built from ``settings.storage_url`` when omitted

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or PaywallSettings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger(__name__)

    # Only resources created here are closed on shutdown
    owned = []
    if verifier is None:
        verifier = LNDClient(settings.lnd)
        owned.append(verifier)
    if store is None:
        store = create_store(settings.storage_url, timeout=settings.storage_timeout)
        owned.append(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        for resource in owned:
            logger.info(f"[main] Closing {type(resource).__name__}")
            resource.close()

    app = FastAPI(
        title="Lightning Paywall Demo",
        description="API endpoints paid for with Lightning invoices",
        version=API_VERSION,
        lifespan=lifespan,
    )

    authorizer = Authorizer(verifier, store)
    routes = {
        f"GET {PAID_ROUTE}": ChargeConfig(amount=settings.amount, memo=settings.memo),
    }
    app.add_middleware(
        paywall(
            authorizer,
            routes,
            header_name=settings.header_name,
            skip_paths=[HEALTH_ROUTE],
        )
    )

    @app.get(HEALTH_ROUTE)
    async def health_check() -> JSONResponse:
        """Health check endpoint for monitoring and load balancers."""
        return JSONResponse(
            content={
                "status": "healthy",
                "service": SERVICE_NAME,
                "version": API_VERSION,
            }
        )

    @app.get(PAID_ROUTE)
    async def ping() -> JSONResponse:
        return JSONResponse(content={"message": "pong"})

    return app
