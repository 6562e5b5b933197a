"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoiceflow import __version__
from invoiceflow.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from invoiceflow.api.middleware.error_handler import setup_exception_handlers
from invoiceflow.api.routes import (
    customers_router,
    health_router,
    invoices_router,
    products_router,
    purchases_router,
    reports_router,
    suppliers_router,
)
from invoiceflow.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the pool on startup. On shutdown waits
    for pending backup tasks, then closes the pool.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    try:
        from invoiceflow.infrastructure.storage.sqlite import get_pool
        from invoiceflow.infrastructure.storage.sqlite.migrations import run_migrations

        await run_migrations()
        logger.info("database_initialized")

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    if not settings.backup.script_url:
        logger.warning("backup_disabled", reason="script_url_not_set")

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    try:
        from invoiceflow.application.services import shutdown_services

        await shutdown_services()
        logger.info("backup_tasks_drained")

    except Exception as e:
        logger.warning("backup_drain_failed", error=str(e))

    try:
        from invoiceflow.infrastructure.storage.sqlite import close_pool

        await close_pool()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

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
        title="InvoiceFlow Ledger API",
        description="Invoices, purchases and stock for a single shop",
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

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(products_router)
    app.include_router(invoices_router)
    app.include_router(purchases_router)
    app.include_router(customers_router)
    app.include_router(suppliers_router)
    app.include_router(reports_router)

    return app


# Create app instance
app = create_app()


@app.get("/")
async def root() -> dict[str, str]:
    """API info."""
    return {
        "name": "InvoiceFlow Ledger API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "invoiceflow.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
