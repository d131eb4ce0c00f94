"""
==============================================================================
Product Endpoints
==============================================================================

CRUD endpoints for product batches. The routes live under /users, the
path existing clients already call.

==============================================================================
"""

from typing import List

from fastapi import APIRouter, Depends, status

from shelfwatch.core.dependencies import get_product_service
from shelfwatch.schemas.common import MessageResponse
from shelfwatch.schemas.product import (
    ProductCreate,
    ProductDelete,
    ProductDetail,
    ProductResponse,
)
from shelfwatch.services.product_service import ProductService


router = APIRouter(prefix="/users", tags=["Products"])


class ProductController:
    """Controller for product operations."""

    def __init__(self, service: ProductService):
        self._service = service

    def list_all(self) -> List[ProductDetail]:
        """List all products."""
        return [ProductDetail.from_product(p) for p in self._service.list_all()]

    def get(self, barcode: str) -> ProductDetail:
        """Get product by barcode."""
        return ProductDetail.from_product(self._service.get_by_barcode(barcode))

    def create(self, data: ProductCreate) -> ProductResponse:
        """Create a product batch."""
        product = self._service.create(data)
        return ProductResponse(
            message="Produto cadastrado com sucesso",
            product=ProductDetail.from_product(product),
        )

    def delete(self, data: ProductDelete) -> MessageResponse:
        """Delete a product batch by barcode and expiration date."""
        self._service.delete(data)
        return MessageResponse(message="Produto deletado com sucesso")


@router.get("", response_model=List[ProductDetail])
def list_products(service: ProductService = Depends(get_product_service)):
    """List every stored product."""
    return ProductController(service).list_all()


@router.get("/{codigo_barra}", response_model=ProductDetail)
def get_product(codigo_barra: str, service: ProductService = Depends(get_product_service)):
    """Get the first product with the given barcode."""
    return ProductController(service).get(codigo_barra)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(request: ProductCreate, service: ProductService = Depends(get_product_service)):
    """Register a product batch."""
    return ProductController(service).create(request)


@router.delete("", response_model=MessageResponse)
def delete_product(request: ProductDelete, service: ProductService = Depends(get_product_service)):
    """Delete the batch matching barcode and expiration date."""
    return ProductController(service).delete(request)
