"""
Custom exception classes for the external integrations (Stripe, Prodigi).

Services translate these into domain errors (checkout path) or
FulfillmentError values (webhook path).
"""
from typing import Any, Optional


class IntegrationError(Exception):
    """Base class for failures talking to a third-party API."""

    def __init__(self, message: str, payload: Optional[Any] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload
        self.status_code = status_code


class AssetUploadError(IntegrationError):
    """Raised when the asset host does not return a usable asset."""
    pass


class FulfillmentAPIError(IntegrationError):
    """Raised when Prodigi cannot be reached or answers with an error."""
    pass


class PaymentGatewayError(IntegrationError):
    """Raised when a Stripe call fails or Stripe is not configured."""
    pass
