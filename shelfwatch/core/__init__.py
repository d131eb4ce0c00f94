"""
==============================================================================
Core Package
==============================================================================

Exception taxonomy and FastAPI dependencies.

Modules:
-------
- exceptions: AppException, ValidationError, NotFoundError, StoreError, MailError
- dependencies: store/service/scheduler providers for route handlers

==============================================================================
"""

from .exceptions import (
    AppException,
    MailError,
    NotFoundError,
    StoreError,
    ValidationError,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "MailError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
    "register_exception_handlers",
]
