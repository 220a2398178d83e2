"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_ledger import __version__
from inventory_ledger.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from inventory_ledger.api.middleware.error_handler import setup_exception_handlers
from inventory_ledger.api.routes import (
    activity_router,
    health_router,
    inflows_router,
    outflows_router,
    references_router,
    reports_router,
    stock_router,
)
from inventory_ledger.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Runs pending migrations and opens the connection pool on startup;
    closes the pool on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
        db_path=str(settings.storage.db_path),
    )

    from inventory_ledger.infrastructure.storage.sqlite import close_pool, get_pool
    from inventory_ledger.infrastructure.storage.sqlite.migrations import run_migrations

    try:
        results = await run_migrations()
        logger.info("migrations_checked", applied=len(results))

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")
    await close_pool()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Inventory Ledger API",
        description="Warehouse stock ledger: inflows, outflows, stock levels and reports",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(inflows_router)
    app.include_router(outflows_router)
    app.include_router(stock_router)
    app.include_router(reports_router)
    app.include_router(activity_router)
    app.include_router(references_router)

    return app


# Create app instance
app = create_app()


# Root health endpoint (for container health checks)
@app.get("/health")
async def root_health() -> dict[str, str]:
    """Simple health check at root level."""
    return {
        "status": "healthy",
        "version": __version__,
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "inventory_ledger.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
