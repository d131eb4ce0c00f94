"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy database infrastructure, the Product model and the store.

Architecture:
------------
├── database.py   - DatabaseManager, declarative Base
├── models.py     - Product ORM model
└── store.py      - ProductStore persistence operations

Usage:
------
    from shelfwatch.db import DatabaseManager, ProductStore

    db_manager = DatabaseManager(settings.database_url)
    db_manager.create_tables()
    store = ProductStore(db_manager)
    products = store.find_all()

==============================================================================
"""

from .database import Base, DatabaseManager
from .models import Product
from .store import ProductStore

__all__ = [
    "Base",
    "DatabaseManager",
    "Product",
    "ProductStore",
]
