"""
Stripe Service — hosted Checkout session creation.

The session carries productId plus the image reference in its metadata;
Stripe round-trips that metadata verbatim into the
checkout.session.completed webhook, which is all fulfillment needs.
"""
import logging
from typing import Optional

import stripe
from pydantic import BaseModel

from config import Settings
from domain.catalog import CatalogEntry
from domain.constants import ALLOWED_SHIPPING_COUNTRIES, METADATA_PRODUCT_ID
from exceptions import PaymentGatewayError
from services.image_stager import ImageReference

logger = logging.getLogger(__name__)


class CheckoutSession(BaseModel):
    id: str
    url: str


def build_redirect_urls(return_url: str) -> tuple[str, str]:
    """success_url / cancel_url for a client return URL."""
    separator = "&" if "?" in return_url else "?"
    success_url = f"{return_url}{separator}success=true&session_id={{CHECKOUT_SESSION_ID}}"
    cancel_url = f"{return_url}{separator}canceled=true"
    return success_url, cancel_url


class StripeCheckoutGateway:
    """Creates Checkout sessions through the async StripeClient API."""

    def __init__(self, settings: Settings, client: Optional[stripe.StripeClient] = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> stripe.StripeClient:
        if self._client is None:
            if not self.settings.stripe_secret_key:
                raise PaymentGatewayError("Stripe is not configured (STRIPE_SECRET_KEY missing)")
            self._client = stripe.StripeClient(
                self.settings.stripe_secret_key,
                http_client=stripe.HTTPXClient(timeout=self.settings.http_timeout_seconds),
                max_network_retries=0,
            )
        return self._client

    def build_session_params(
        self,
        *,
        entry: CatalogEntry,
        image_ref: ImageReference,
        return_url: str,
    ) -> dict:
        success_url, cancel_url = build_redirect_urls(return_url)
        product_data = {
            "name": entry.name,
            "description": self.settings.product_description,
        }
        if self.settings.product_image_url:
            product_data["images"] = [self.settings.product_image_url]

        return {
            "line_items": [{
                "price_data": {
                    "currency": self.settings.currency,
                    "product_data": product_data,
                    "unit_amount": entry.price,
                },
                "quantity": 1,
            }],
            "mode": "payment",
            "shipping_address_collection": {
                "allowed_countries": list(ALLOWED_SHIPPING_COUNTRIES),
            },
            "metadata": {
                METADATA_PRODUCT_ID: entry.id,
                **image_ref.to_metadata(),
            },
            "success_url": success_url,
            "cancel_url": cancel_url,
        }

    async def create_session(
        self,
        *,
        entry: CatalogEntry,
        image_ref: ImageReference,
        return_url: str,
    ) -> CheckoutSession:
        """
        Create a hosted Checkout session.

        Raises:
            PaymentGatewayError: Stripe not configured or the API call failed
        """
        client = self._get_client()
        params = self.build_session_params(entry=entry, image_ref=image_ref, return_url=return_url)

        try:
            session = await client.v1.checkout.sessions.create_async(params=params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise PaymentGatewayError(
                "Stripe checkout session creation failed",
                payload=getattr(e, "json_body", None),
                status_code=getattr(e, "http_status", None),
            )

        return CheckoutSession(id=session.id, url=session.url)
