"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

==============================================================================
"""

from .common import MessageResponse
from .product import ProductCreate, ProductDelete, ProductDetail, ProductResponse

__all__ = [
    "MessageResponse",
    "ProductCreate",
    "ProductDelete",
    "ProductDetail",
    "ProductResponse",
]
