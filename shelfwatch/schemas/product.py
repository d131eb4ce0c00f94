"""
==============================================================================
Product Schemas Module
==============================================================================

Request and response schemas for the product endpoints.

Field names match the JSON clients already send (codigo_barra,
nome_produto, quantidade_produto, validade_produto). Required fields are
declared Optional here so that a missing field is answered with the
400 validation message by the service, not a framework 422.

==============================================================================
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from shelfwatch.db.models import Product


def _strip_time(value: Any) -> Any:
    """Accept ISO datetimes for date fields by dropping the time part."""
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ProductCreate(BaseModel):
    """Body of POST /users."""

    codigo_barra: Optional[str] = Field(default=None, max_length=64)
    nome_produto: Optional[str] = Field(default=None, max_length=255)
    quantidade_produto: Optional[str] = Field(default=None, max_length=64)
    validade_produto: Optional[date] = None

    @field_validator("quantidade_produto", mode="before")
    @classmethod
    def quantity_as_text(cls, value: Any) -> Any:
        """Quantity is stored as text; a numeric zero counts as missing."""
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return str(value) if value else None
        return _blank_to_none(value)

    @field_validator("codigo_barra", mode="before")
    @classmethod
    def blank_barcode(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("validade_produto", mode="before")
    @classmethod
    def expiration_as_date(cls, value: Any) -> Any:
        return _strip_time(_blank_to_none(value))


class ProductDelete(BaseModel):
    """Body of DELETE /users."""

    codigo_barra: Optional[str] = Field(default=None, max_length=64)
    validade_produto: Optional[date] = None

    @field_validator("codigo_barra", mode="before")
    @classmethod
    def blank_barcode(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("validade_produto", mode="before")
    @classmethod
    def expiration_as_date(cls, value: Any) -> Any:
        return _strip_time(_blank_to_none(value))


class ProductDetail(BaseModel):
    """Product as returned by the API."""

    id: int
    codigo_barra: str
    nome_produto: Optional[str] = None
    quantidade_produto: str
    validade_produto: date

    @classmethod
    def from_product(cls, product: Product) -> "ProductDetail":
        return cls(
            id=product.id,
            codigo_barra=product.barcode,
            nome_produto=product.name,
            quantidade_produto=product.quantity,
            validade_produto=product.expiration_date,
        )


class ProductResponse(BaseModel):
    """Response of a successful create."""

    success: bool = Field(default=True)
    message: str
    product: ProductDetail
