"""
Tests for input validation utilities.

Tests: require_image_data, decode_image_data, validate_image_url, validate_return_url
"""
import pytest

from domain.errors import InvalidImageError, MissingImageError, ValidationError
from tests.helpers import PNG_BYTES, VALID_IMAGE_B64, VALID_IMAGE_DATA_URL
from utils.validators import (
    decode_image_data,
    require_image_data,
    strip_data_url,
    validate_image_url,
    validate_return_url,
)


class TestImageData:

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_image_raises_400(self, value):
        with pytest.raises(MissingImageError) as exc_info:
            require_image_data(value)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "No image data provided"

    @pytest.mark.unit
    def test_bare_base64_decodes(self):
        assert decode_image_data(VALID_IMAGE_B64) == PNG_BYTES

    @pytest.mark.unit
    def test_data_url_decodes(self):
        assert decode_image_data(VALID_IMAGE_DATA_URL) == PNG_BYTES

    @pytest.mark.unit
    def test_strip_data_url_leaves_bare_base64_alone(self):
        assert strip_data_url(VALID_IMAGE_B64) == VALID_IMAGE_B64
        assert strip_data_url(VALID_IMAGE_DATA_URL) == VALID_IMAGE_B64

    @pytest.mark.unit
    def test_wrapped_base64_decodes(self):
        wrapped = "\n".join(VALID_IMAGE_B64[i:i + 20] for i in range(0, len(VALID_IMAGE_B64), 20))
        assert decode_image_data(wrapped) == PNG_BYTES

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["not base64!!", "abc", "data:image/png;base64,%%%%"])
    def test_invalid_base64_raises_400(self, value):
        with pytest.raises(InvalidImageError) as exc_info:
            decode_image_data(value)
        assert exc_info.value.status_code == 400


class TestUrls:

    @pytest.mark.unit
    def test_image_url_accepted(self):
        url = "https://cdn.example.com/portrait.jpg"
        assert validate_image_url(url) == url

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["ftp://example.com/x.png", VALID_IMAGE_B64, "/relative.png"])
    def test_non_http_image_rejected(self, value):
        with pytest.raises(InvalidImageError):
            validate_image_url(value)

    @pytest.mark.unit
    def test_image_url_length_limit(self):
        base = "https://cdn.example.com/"
        at_limit = base + "a" * (500 - len(base))
        assert validate_image_url(at_limit) == at_limit

        with pytest.raises(InvalidImageError) as exc_info:
            validate_image_url(at_limit + "a")
        assert exc_info.value.status_code == 400
        assert "500" in exc_info.value.message

    @pytest.mark.unit
    def test_return_url_accepted(self):
        assert validate_return_url("https://x/y") == "https://x/y"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_return_url(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_return_url(value)
        assert "returnUrl is required" in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["javascript:alert(1)", "x/y", "mailto:a@b.c"])
    def test_bad_return_url(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_return_url(value)
        assert exc_info.value.status_code == 400
