# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Greens Marketplace API.
# It builds the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   greens-marketplace --config config.yaml
#   uvicorn app.main:create_app --factory
# =============================================================================

import argparse
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.auth import routes as auth_routes
from app.config import Settings, load_settings
from app.dependencies import build_services
from app.exceptions import install_exception_handlers
from app.logging_config import configure_logging
from app.middleware import install_middleware
from app.routers import cart, health, notifications, orders, products, search, users
from lib.embeddings import EmbeddingClient
from lib.redis_client import RedisStore
from lib.supabase_client import SupabaseStore

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def create_app(
    settings: Settings | None = None,
    *,
    store: SupabaseStore | None = None,
    cache: RedisStore | None = None,
    embeddings: EmbeddingClient | None = None,
) -> FastAPI:
    """
    Build the application.

    Adapters that are passed in are used as-is and left open on shutdown;
    the rest are connected during startup. A connection failure at startup
    aborts the process.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Runs on startup and shutdown:
        - Startup: Connect adapters, wire services
        - Shutdown: Close the adapters this app opened
        """
        logger.info(f"Starting Greens Marketplace API in {settings.ENVIRONMENT} mode")
        logger.info(f"CORS origins: {settings.cors_origins_list}")

        owned = []
        app_store = store
        if app_store is None:
            app_store = await SupabaseStore.connect(settings)
            owned.append(app_store)
        app_cache = cache
        if app_cache is None:
            app_cache = await RedisStore.connect(settings)
            owned.append(app_cache)
        app_embeddings = embeddings
        if app_embeddings is None:
            app_embeddings = EmbeddingClient(settings)
            owned.append(app_embeddings)
            if not app_embeddings.enabled:
                logger.warning("OPENAI_API_KEY not set; semantic search will fall back to keyword search")

        app.state.store = app_store
        app.state.cache = app_cache
        app.state.services = build_services(settings, app_store, app_cache, app_embeddings)

        yield

        logger.info("Shutting down Greens Marketplace API")
        for adapter in owned:
            await adapter.close()

    app = FastAPI(
        title="Greens Marketplace API",
        description="""
## Marketplace Backend

Accounts, product listings, cart and wishlist, orders with escrow-style
payment tracking, reviews, notifications, and keyword plus semantic
(vector) product search.

### Authentication

Log in at `POST /api/v1/auth/login` and send the access token as
`Authorization: Bearer <token>`. Refresh it with `POST /api/v1/auth/refresh`.

### Errors

Every error has the shape `{"error": "...", "code": "..."}` with an
optional `"suggestion"`.
""",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Auth", "description": "Register, log in, refresh and revoke tokens"},
            {"name": "Users", "description": "Profile and preferences"},
            {"name": "Products", "description": "Categories, listings and reviews"},
            {"name": "Search", "description": "Keyword and semantic product search"},
            {"name": "Cart", "description": "Cart and wishlist"},
            {"name": "Orders", "description": "Orders, status changes and payments"},
            {"name": "Notifications", "description": "In-app notifications"},
            {"name": "Health", "description": "Liveness check"},
        ],
    )
    app.state.settings = settings

    # =========================================================================
    # Middleware and Exception Handlers
    # =========================================================================

    install_middleware(app, settings)
    install_exception_handlers(app)

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(health.router, tags=["Health"])

    prefix = settings.API_PREFIX
    app.include_router(auth_routes.router, prefix=prefix)
    app.include_router(users.router, prefix=prefix)
    app.include_router(products.router, prefix=prefix)
    app.include_router(search.router, prefix=prefix)
    app.include_router(cart.router, prefix=prefix)
    app.include_router(orders.router, prefix=prefix)
    app.include_router(notifications.router, prefix=prefix)

    return app


def main() -> None:
    """Console entry point: load config, set up logging, serve."""
    parser = argparse.ArgumentParser(description="Greens Marketplace API server")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    args = parser.parse_args()

    settings = load_settings(config_file=args.config)
    configure_logging(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.API_HOST,
        port=settings.API_PORT,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
        log_config=None,
    )


if __name__ == "__main__":
    main()
