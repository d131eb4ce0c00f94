"""
==============================================================================
Product Store Module
==============================================================================

Persistence operations over product records.

Every call runs in its own session scope: single-row statements, committed
on success and rolled back on failure. SQLAlchemy errors are logged with
their detail and re-raised as StoreError, which carries only a static
message.

Operations:
----------
- find_all()                                  → all products
- find_by_barcode(barcode)                    → first match or None
- find_in_range(start, end)                   → expiration_date in [start, end]
- insert(barcode, quantity, expiration_date)  → stored product
- delete_by_compound_key(barcode, date)       → deleted product or None

==============================================================================
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from shelfwatch.core.exceptions import StoreError
from shelfwatch.db.database import DatabaseManager
from shelfwatch.db.models import Product


# Module logger
logger = logging.getLogger(__name__)


class ProductStore:
    """
    Store of product batches.

    Attributes:
        _db_manager: DatabaseManager providing sessions

    Example:
        >>> store = ProductStore(db_manager)
        >>> store.insert("789100", "12", date(2026, 12, 3), name="Leite")
        <Product(id=1, barcode='789100', expiration_date=2026-12-03)>
        >>> store.find_in_range(date(2026, 12, 1), date(2026, 12, 31))
        [<Product(id=1, barcode='789100', expiration_date=2026-12-03)>]
    """

    def __init__(self, db_manager: DatabaseManager) -> None:
        self._db_manager = db_manager

    def ping(self) -> bool:
        """Check the database answers."""
        return self._db_manager.verify_connection()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def find_all(self) -> List[Product]:
        """Return every product, oldest insert first."""
        try:
            with self._db_manager.session_scope() as session:
                return session.query(Product).order_by(Product.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list products: {e}")
            raise StoreError("Erro ao buscar produtos") from e

    def find_by_barcode(self, barcode: str) -> Optional[Product]:
        """Return the first product stored under ``barcode``, if any."""
        try:
            with self._db_manager.session_scope() as session:
                return (
                    session.query(Product)
                    .filter(Product.barcode == barcode)
                    .order_by(Product.id)
                    .first()
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up product {barcode!r}: {e}")
            raise StoreError("Erro ao buscar o produto") from e

    def find_in_range(self, start: date, end: date) -> List[Product]:
        """
        Return products expiring between ``start`` and ``end``.

        Both bounds are inclusive.
        """
        try:
            with self._db_manager.session_scope() as session:
                return (
                    session.query(Product)
                    .filter(
                        Product.expiration_date >= start,
                        Product.expiration_date <= end,
                    )
                    .order_by(Product.expiration_date, Product.id)
                    .all()
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to query products expiring {start}..{end}: {e}")
            raise StoreError("Erro ao buscar produtos") from e

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def insert(
        self,
        barcode: str,
        quantity: str,
        expiration_date: date,
        name: Optional[str] = None,
    ) -> Product:
        """Persist a new product batch and return it with its id."""
        product = Product(
            barcode=barcode,
            name=name,
            quantity=quantity,
            expiration_date=expiration_date,
        )
        try:
            with self._db_manager.session_scope() as session:
                session.add(product)
                session.flush()
                session.refresh(product)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save product {barcode!r}: {e}")
            raise StoreError("Erro ao salvar o produto") from e

        logger.info(f"Saved product {barcode!r} expiring {expiration_date} (id={product.id})")
        return product

    def delete_by_compound_key(self, barcode: str, expiration_date: date) -> Optional[Product]:
        """
        Delete the first batch matching both barcode and expiration date.

        Returns:
            The deleted product, or None when nothing matched
        """
        try:
            with self._db_manager.session_scope() as session:
                product = (
                    session.query(Product)
                    .filter(
                        Product.barcode == barcode,
                        Product.expiration_date == expiration_date,
                    )
                    .order_by(Product.id)
                    .first()
                )
                if product is None:
                    return None
                session.delete(product)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete product {barcode!r} ({expiration_date}): {e}")
            raise StoreError("Erro ao deletar o produto") from e

        logger.info(f"Deleted product {barcode!r} expiring {expiration_date}")
        return product
