"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from shelfwatch.core.dependencies import get_product_store, get_scheduler
from shelfwatch.db.store import ProductStore
from shelfwatch.services.scheduler import ExpirationScheduler


router = APIRouter(tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, store: ProductStore, scheduler: Optional[ExpirationScheduler]):
        self._store = store
        self._scheduler = scheduler

    def check_database(self) -> str:
        """Check database connectivity."""
        return "healthy" if self._store.ping() else "unhealthy"

    def check_scheduler(self) -> dict:
        """Check scheduler status."""
        if self._scheduler is None or not self._scheduler.is_running:
            return {"status": "stopped", "jobs": []}
        return {
            "status": "running",
            "scan_in_progress": self._scheduler.scan_in_progress,
            "jobs": self._scheduler.get_jobs_info(),
        }

    def get_health(self) -> dict:
        """Get full health status."""
        db_status = self.check_database()
        scheduler_info = self.check_scheduler()

        overall = "healthy" if db_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "database": db_status,
                "scheduler": scheduler_info["status"],
            },
            "details": {
                "scheduler": scheduler_info,
            },
        }


@router.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness message."""
    return "Server is Running"


@router.get("/health")
def health_check(
    store: ProductStore = Depends(get_product_store),
    scheduler: Optional[ExpirationScheduler] = Depends(get_scheduler),
):
    """
    Health check endpoint.

    Returns system status including API, database, and scheduler.
    """
    controller = HealthController(store, scheduler)
    return controller.get_health()


@router.get("/health/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
