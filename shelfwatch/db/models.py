"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                          products                                │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK, AUTO INCREMENT)                                │
    │ barcode (VARCHAR, NOT NULL, INDEXED)                            │
    │ name (VARCHAR, NULLABLE)                                        │
    │ quantity (VARCHAR, NOT NULL)                                    │
    │ expiration_date (DATE, NOT NULL, INDEXED)                       │
    │ created_at (DATETIME, DEFAULT now)                              │
    └─────────────────────────────────────────────────────────────────┘

A barcode may appear on several rows, one per batch; (barcode,
expiration_date) is the key used for deletion.

=============================================================================
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Column, Date, DateTime, Index, Integer, String, func

from shelfwatch.db.database import Base


class Product(Base):
    """
    A stocked batch of a product.

    Attributes:
        id: Surrogate primary key
        barcode: Barcode as scanned, the lookup key
        name: Display name (optional)
        quantity: Quantity as free text, e.g. "12" or "3 caixas"
        expiration_date: Calendar date the batch expires
        created_at: Insertion timestamp
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    barcode = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    quantity = Column(String(64), nullable=False)
    expiration_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_products_barcode_expiration", "barcode", "expiration_date"),
    )

    def days_until_expiration(self, today: date) -> int:
        """Whole calendar days from ``today`` to the expiration date."""
        return (self.expiration_date - today).days

    def __repr__(self) -> str:
        return (
            f"<Product(id={self.id}, barcode={self.barcode!r}, "
            f"expiration_date={self.expiration_date})>"
        )
