"""
Shared test doubles and builders.

Fakes stand in for the two third-party APIs so no test touches the network:
FakeProdigi mirrors ProdigiClient, FakeCheckoutGateway mirrors
StripeCheckoutGateway.
"""
import base64
import hashlib
import hmac
import json
import time
from typing import Optional

from config import Settings
from exceptions import AssetUploadError, FulfillmentAPIError, PaymentGatewayError
from services.stripe_service import CheckoutSession, StripeCheckoutGateway

TEST_WEBHOOK_SECRET = "whsec_test_secret"

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
VALID_IMAGE_B64 = base64.b64encode(PNG_BYTES).decode("ascii")
VALID_IMAGE_DATA_URL = f"data:image/png;base64,{VALID_IMAGE_B64}"

JANE_DOE_SHIPPING = {
    "name": "Jane Doe",
    "address": {
        "line1": "1 Main St",
        "line2": None,
        "postal_code": "10001",
        "city": "NYC",
        "state": None,
        "country": "US",
    },
}


def make_settings(**overrides) -> Settings:
    values = {
        "stripe_secret_key": "sk_test_123",
        "stripe_webhook_secret": TEST_WEBHOOK_SECRET,
        "prodigi_api_key": "prodigi_test_key",
        "environment": "test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def sign_payload(payload: bytes, secret: str = TEST_WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header (t=...,v1=...) for a raw body."""
    if timestamp is None:
        timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def make_event(event_type: str, obj: dict, event_id: str = "evt_test_1") -> bytes:
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj},
    }).encode("utf-8")


def completed_session(session_id: str, metadata: dict, shipping: Optional[dict] = None) -> dict:
    return {
        "id": session_id,
        "object": "checkout.session",
        "payment_status": "paid",
        "metadata": metadata,
        "shipping_details": shipping if shipping is not None else JANE_DOE_SHIPPING,
    }


class FakeProdigi:
    """Records uploads and orders; failure modes are switched on per test."""

    def __init__(self):
        self.uploads = []
        self.orders = []
        self.fail_upload = False
        self.reject_orders = False
        self.unreachable = False

    async def upload_asset(self, image_data: str) -> str:
        if self.fail_upload:
            raise AssetUploadError("Asset host returned no asset id", payload={"error": "bad image"})
        self.uploads.append(image_data)
        return f"asset_{len(self.uploads)}"

    async def create_order(self, order: dict) -> str:
        if self.unreachable:
            raise FulfillmentAPIError("Prodigi unreachable: timed out")
        if self.reject_orders:
            raise FulfillmentAPIError(
                "Prodigi order was not created",
                payload={"outcome": "ValidationFailed", "failures": {"sku": ["invalid"]}},
                status_code=400,
            )
        self.orders.append(order)
        return f"ord_{len(self.orders)}"


class FakeCheckoutGateway(StripeCheckoutGateway):
    """Builds real session params but never calls Stripe."""

    def __init__(self, settings: Settings):
        super().__init__(settings, client=None)
        self.calls = []
        self.fail = False

    async def create_session(self, *, entry, image_ref, return_url) -> CheckoutSession:
        if self.fail:
            raise PaymentGatewayError("Stripe checkout session creation failed")
        params = self.build_session_params(entry=entry, image_ref=image_ref, return_url=return_url)
        self.calls.append(params)
        session_id = f"cs_test_{len(self.calls)}"
        return CheckoutSession(id=session_id, url=f"https://checkout.stripe.com/c/pay/{session_id}")
