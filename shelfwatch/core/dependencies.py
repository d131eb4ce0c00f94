"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the objects built at startup.

The Application lifespan stores the ProductStore and ExpirationScheduler
on ``app.state``; route handlers receive them through these functions,
which tests replace with ``app.dependency_overrides``.

Dependency Hierarchy:
--------------------
        ┌─────────────────────┐
        │ get_product_store() │
        └──────────┬──────────┘
                   │
        ┌──────────▼──────────┐
        │ get_product_service │
        └─────────────────────┘

==============================================================================
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from shelfwatch.db.store import ProductStore
from shelfwatch.services.product_service import ProductService
from shelfwatch.services.scheduler import ExpirationScheduler


def get_product_store(request: Request) -> ProductStore:
    """Return the store created at startup."""
    return request.app.state.store


def get_product_service(store: ProductStore = Depends(get_product_store)) -> ProductService:
    """Build a ProductService over the injected store."""
    return ProductService(store)


def get_scheduler(request: Request) -> Optional[ExpirationScheduler]:
    """Return the expiration scheduler, if the app started one."""
    return getattr(request.app.state, "scheduler", None)
