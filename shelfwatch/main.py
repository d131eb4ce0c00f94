"""
==============================================================================
Shelfwatch - Application Entry Point
==============================================================================

FastAPI application with:
- Product CRUD endpoints
- Daily expiration scan with email warnings
- Health checks

Usage:
------
    # Development
    uvicorn shelfwatch.main:app --reload --port 3000

    # Production
    uvicorn shelfwatch.main:app --host 0.0.0.0 --port 3000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelfwatch.api.router import api_router
from shelfwatch.config import Settings, get_settings
from shelfwatch.core.exceptions import register_exception_handlers
from shelfwatch.db import DatabaseManager, ProductStore
from shelfwatch.services.expiration_scanner import ExpirationScanner, Notifier
from shelfwatch.services.notifier import EmailNotifier
from shelfwatch.services.scheduler import ExpirationScheduler


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Builds the store, notifier, scanner and scheduler at startup and
    places them on ``app.state`` for the dependency providers.

    Args:
        settings: Configuration (defaults to the environment)
        notifier: Notifier override, e.g. a recording fake in tests
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
    ):
        self._settings = settings or get_settings()
        self._notifier = notifier
        self._db_manager: Optional[DatabaseManager] = None
        self._scheduler: Optional[ExpirationScheduler] = None
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Inventory tracking with expiration warnings",
            lifespan=self._lifespan,
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup(app)
        yield
        self._shutdown()

    def _startup(self, app: FastAPI) -> None:
        """Build collaborators and start the scheduler."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        self._settings.ensure_directories()
        self._db_manager = DatabaseManager(
            self._settings.database_url,
            echo=self._settings.debug,
        )
        self._db_manager.create_tables()

        store = ProductStore(self._db_manager)
        notifier = self._notifier or EmailNotifier(self._settings)
        scanner = ExpirationScanner(store, notifier)
        self._scheduler = ExpirationScheduler(scanner, self._settings)

        app.state.store = store
        app.state.scanner = scanner
        app.state.scheduler = self._scheduler

        if not self._settings.email_to:
            logger.warning("⚠️ EMAIL_TO not set, expiration warnings will not be sent")

        self._scheduler.start()

        logger.info("=" * 60)
        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info("=" * 60)

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        if self._scheduler is not None:
            self._scheduler.stop()
        if self._db_manager is not None:
            self._db_manager.dispose()
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application(settings)
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shelfwatch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
