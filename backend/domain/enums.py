"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class ImageReferenceKind(str, Enum):
    ASSET = "asset"    # Prodigi asset id, uploaded before checkout
    URL = "url"        # publicly reachable image URL
    HANDLE = "handle"  # key into the in-process image store


class ErrorKind(str, Enum):
    INVALID_PRODUCT = "invalid_product"
    MISSING_IMAGE = "missing_image"
    INVALID_IMAGE = "invalid_image"
    INVALID_REQUEST = "invalid_request"
    IMAGE_PREPARATION_FAILED = "image_preparation_failed"
    PAYMENT_PROVIDER_ERROR = "payment_provider_error"
    INTERNAL_ERROR = "internal_error"


class FulfillmentErrorKind(str, Enum):
    MISSING_IMAGE_REFERENCE = "missing_image_reference"
    UNKNOWN_PRODUCT = "unknown_product"
    MISSING_SHIPPING = "missing_shipping"
    IMAGE_NOT_FOUND = "image_not_found"
    ASSET_UPLOAD_FAILED = "asset_upload_failed"
    ORDER_REJECTED = "order_rejected"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    DUPLICATE = "duplicate"
    INTERNAL_ERROR = "internal_error"
