"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes by the exception handlers
in main.py, which render them as {"error": <message>, "code": <kind>}.
"""
from fastapi import HTTPException, status

from domain.enums import ErrorKind


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class InvalidProductError(DomainError):
    """Unknown catalog identifier (400)."""
    kind = ErrorKind.INVALID_PRODUCT

    def __init__(self, product_id: str | None = None):
        super().__init__("Invalid product", details={"productId": product_id})


class MissingImageError(DomainError):
    """No image data in the checkout request (400)."""
    kind = ErrorKind.MISSING_IMAGE

    def __init__(self, message: str = "No image data provided"):
        super().__init__(message)


class InvalidImageError(DomainError):
    """Image data present but unusable (400)."""
    kind = ErrorKind.INVALID_IMAGE

    def __init__(self, message: str = "Image data is not valid base64"):
        super().__init__(message)


class ValidationError(DomainError):
    """Validation error (400)."""
    kind = ErrorKind.INVALID_REQUEST

    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class ImagePreparationError(DomainError):
    """Image staging failed upstream (500)."""
    kind = ErrorKind.IMAGE_PREPARATION_FAILED

    def __init__(self, message: str = "Failed to prepare image for printing", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)


class PaymentProviderError(DomainError):
    """Checkout session could not be created (500)."""
    kind = ErrorKind.PAYMENT_PROVIDER_ERROR

    def __init__(self, message: str = "Failed to create checkout session", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
