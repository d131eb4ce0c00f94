"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes implementing business logic.

This package provides:
- ProductService: Product CRUD rules for the API
- EmailNotifier: Expiration warning emails
- ExpirationScanner: Threshold matching over the scan window
- ExpirationScheduler: Daily trigger for the scanner

Architecture Pattern: Service Layer
----------------------------------
    ┌─────────────────┐        ┌─────────────────────┐
    │   API Router    │        │ ExpirationScheduler │
    └────────┬────────┘        └──────────┬──────────┘
             │                            │
    ┌────────▼────────┐        ┌──────────▼──────────┐
    │ ProductService  │        │  ExpirationScanner  │──▶ EmailNotifier
    └────────┬────────┘        └──────────┬──────────┘
             │                            │
             └──────────┬─────────────────┘
               ┌────────▼────────┐
               │  ProductStore   │
               └─────────────────┘

Services receive their collaborators through the constructor.

==============================================================================
"""

from .expiration_scanner import ExpirationScanner, ScanReport
from .notifier import EmailNotifier, NotificationResult
from .product_service import ProductService
from .scheduler import ExpirationScheduler

__all__ = [
    "EmailNotifier",
    "ExpirationScanner",
    "ExpirationScheduler",
    "NotificationResult",
    "ProductService",
    "ScanReport",
]
