"""
Input validation utilities for the Baroque Print API.

Image payloads arrive either as bare base64 or as a data: URL
(data:image/png;base64,....). Return URLs must be absolute http(s).
"""
import base64
import binascii
import re
from urllib.parse import urlparse

from domain.constants import STRIPE_METADATA_VALUE_MAX_LENGTH
from domain.errors import InvalidImageError, MissingImageError, ValidationError

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[\w.-]+)*;base64,", re.IGNORECASE)


def is_http_url(value: str | None) -> bool:
    if not value:
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def require_image_data(image_data: str | None) -> str:
    """
    Ensure the request carried image data at all.

    Raises:
        MissingImageError(400) if the value is missing or blank
    """
    if not image_data or not image_data.strip():
        raise MissingImageError()
    return image_data.strip()


def strip_data_url(image_data: str) -> str:
    """Drop a data: URL prefix, leaving the base64 body."""
    match = _DATA_URL_RE.match(image_data)
    if match:
        return image_data[match.end():]
    return image_data


def decode_image_data(image_data: str | None) -> bytes:
    """
    Decode a base64 image (bare or data: URL).

    Raises:
        MissingImageError(400) if empty
        InvalidImageError(400) if not valid base64
    """
    payload = strip_data_url(require_image_data(image_data))
    try:
        decoded = base64.b64decode("".join(payload.split()), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError()
    if not decoded:
        raise MissingImageError()
    return decoded


def validate_image_url(image_data: str | None) -> str:
    """Client-supplied image URL (url strategy)."""
    value = require_image_data(image_data)
    if not is_http_url(value):
        raise InvalidImageError("Image must be an http(s) URL")
    # carried in session metadata
    if len(value) > STRIPE_METADATA_VALUE_MAX_LENGTH:
        raise InvalidImageError(f"Image URL must be at most {STRIPE_METADATA_VALUE_MAX_LENGTH} characters")
    return value


def validate_return_url(return_url: str | None) -> str:
    """
    Validate the URL Stripe redirects back to after payment.

    Raises:
        ValidationError(400) if missing or not absolute http(s)
    """
    if not return_url:
        raise ValidationError("returnUrl is required")
    if not is_http_url(return_url):
        raise ValidationError("must be an absolute http(s) URL", field="returnUrl")
    return return_url
