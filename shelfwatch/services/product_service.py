"""
==============================================================================
Product Service Module
==============================================================================

Business rules behind the product endpoints.

- Creation requires barcode, quantity and expiration date
- Deletion requires barcode and expiration date, matched together
- Lookup by barcode returns the first stored batch

Store failures surface as StoreError and are turned into a 500 by the
exception handlers.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List

from shelfwatch.core import exceptions
from shelfwatch.db.models import Product
from shelfwatch.db.store import ProductStore
from shelfwatch.schemas.product import ProductCreate, ProductDelete


# Module logger
logger = logging.getLogger(__name__)


class ProductService:
    """
    Product operations for the HTTP layer.

    Attributes:
        _store: ProductStore holding the records

    Example:
        >>> service = ProductService(store)
        >>> product = service.create(ProductCreate(
        ...     codigo_barra="789100",
        ...     quantidade_produto="12",
        ...     validade_produto="2026-12-03",
        ... ))
        >>> service.get_by_barcode("789100").id == product.id
        True
    """

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def list_all(self) -> List[Product]:
        """Return every stored product."""
        return self._store.find_all()

    def get_by_barcode(self, barcode: str) -> Product:
        """
        Get the first product stored under ``barcode``.

        Raises:
            NotFoundError: If no product has that barcode
        """
        product = self._store.find_by_barcode(barcode)
        if product is None:
            raise exceptions.product_not_found(barcode)
        return product

    def create(self, data: ProductCreate) -> Product:
        """
        Store a new product batch.

        Raises:
            ValidationError: If barcode, quantity or expiration date is missing
        """
        if not data.codigo_barra or not data.quantidade_produto or data.validade_produto is None:
            logger.debug("Rejected product without barcode, quantity or expiration date")
            raise exceptions.missing_create_fields()

        return self._store.insert(
            barcode=data.codigo_barra,
            quantity=data.quantidade_produto,
            expiration_date=data.validade_produto,
            name=data.nome_produto,
        )

    def delete(self, data: ProductDelete) -> Product:
        """
        Delete the batch matching barcode and expiration date.

        Raises:
            ValidationError: If either key part is missing
            NotFoundError: If no batch matches both
        """
        if not data.codigo_barra or data.validade_produto is None:
            raise exceptions.missing_delete_fields()

        product = self._store.delete_by_compound_key(data.codigo_barra, data.validade_produto)
        if product is None:
            raise exceptions.product_not_found(data.codigo_barra)
        return product
