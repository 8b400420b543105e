"""FastAPI application for the NeoTech store."""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from libs.common.config import Settings, get_settings
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.db.base import Base
from libs.db.config import (
    build_engine,
    build_session_factory,
    ensure_sqlite_directory,
)
from services.store_service.paystack_client import PaystackClient
from services.store_service.routers import (
    admin_catalog_router,
    admin_orders_router,
    auth_router,
    cart_router,
    catalog_router,
    orders_router,
)
from services.store_service.seed_store_data import seed_store_data
from starlette.middleware.sessions import SessionMiddleware

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    paystack_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create and configure the store FastAPI app.

    Everything a request needs (settings, engine, session factory, Paystack
    client) hangs off ``app.state``.
    """
    settings = settings or get_settings()
    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_sqlite_directory(engine)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        if settings.SEED_ON_STARTUP:
            await seed_store_data(app.state.session_factory, settings)
        if not settings.paystack_configured:
            logger.warning(
                "PAYSTACK_SECRET_KEY is not set; checkout will fail at the gateway"
            )
        yield
        await engine.dispose()

    app = FastAPI(
        title="NeoTech Store",
        version="0.1.0",
        description="E-commerce storefront - catalog, cart, Paystack checkout, admin.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.paystack = PaystackClient.from_settings(
        settings, transport=paystack_transport
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=settings.ENVIRONMENT == "production",
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app, settings)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "store"}

    # Public storefront
    app.include_router(catalog_router)
    app.include_router(auth_router)
    app.include_router(cart_router)
    app.include_router(orders_router)

    # Back-office
    app.include_router(admin_catalog_router, prefix="/admin")
    app.include_router(admin_orders_router, prefix="/admin")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.PORT)
