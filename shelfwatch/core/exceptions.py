"""
Application Exception Handling

AppException hierarchy for product, store and mail errors with FastAPI integration.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base application exception.

    Provides a consistent error response format across the API. Only the
    static ``message`` reaches the client; anything diagnostic belongs in
    the log.

    Usage:
        raise AppException("Produto não encontrado", "PRODUCT_NOT_FOUND", 404)

    Error Codes:
        - VALIDATION_ERROR (400)
        - PRODUCT_NOT_FOUND (404)
        - STORE_ERROR (500)
        - MAIL_ERROR (never sent to clients)
        - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }

        if self.details:
            error_dict["details"] = self.details

        return error_dict


class ValidationError(AppException):
    """Required field missing or malformed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class NotFoundError(AppException):
    """Lookup miss."""

    def __init__(self, message: str = "Produto não encontrado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PRODUCT_NOT_FOUND", 404, details)


class StoreError(AppException):
    """Persistence failure. Carries a static message; the cause is chained."""

    def __init__(self, message: str = "Erro ao acessar o banco de dados"):
        super().__init__(message, "STORE_ERROR", 500)


class MailError(AppException):
    """Mail transport failure. Captured by the notifier, never raised to HTTP."""

    def __init__(self, message: str):
        super().__init__(message, "MAIL_ERROR", 502)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to a JSON error response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Map body parsing failures to 400.

    Malformed JSON and unparseable dates count as missing input.
    """
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    error = ValidationError("Dados inválidos na requisição")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def missing_create_fields() -> ValidationError:
    """Create validation error for an incomplete product."""
    return ValidationError("Código de barra, quantidade e validade são obrigatórios")


def missing_delete_fields() -> ValidationError:
    """Create validation error for an incomplete delete request."""
    return ValidationError("Código de barras e validade são obrigatórios")


def product_not_found(barcode: Optional[str] = None) -> NotFoundError:
    """Create product not found exception."""
    details = {"codigo_barra": barcode} if barcode else {}
    return NotFoundError(details=details)
