"""
Tests for Stripe Checkout session creation.

The StripeClient is replaced by a MagicMock; parameters are inspected as
they would be sent.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import stripe

from domain.catalog import Catalog
from domain.enums import ImageReferenceKind
from exceptions import PaymentGatewayError
from services.image_stager import ImageReference
from services.stripe_service import StripeCheckoutGateway, build_redirect_urls
from tests.helpers import make_settings

ASSET_REF = ImageReference(kind=ImageReferenceKind.ASSET, value="asset_42")


def _mock_client(session=None, side_effect=None):
    client = MagicMock()
    client.v1.checkout.sessions.create_async = AsyncMock(return_value=session, side_effect=side_effect)
    return client


class TestRedirectUrls:

    @pytest.mark.unit
    def test_plain_return_url(self):
        success, cancel = build_redirect_urls("https://x/y")
        assert success == "https://x/y?success=true&session_id={CHECKOUT_SESSION_ID}"
        assert cancel == "https://x/y?canceled=true"

    @pytest.mark.unit
    def test_return_url_with_query(self):
        success, cancel = build_redirect_urls("https://x/y?lang=fr")
        assert success == "https://x/y?lang=fr&success=true&session_id={CHECKOUT_SESSION_ID}"
        assert cancel == "https://x/y?lang=fr&canceled=true"


class TestSessionParams:

    @pytest.mark.unit
    def test_params_from_catalog_entry(self):
        gateway = StripeCheckoutGateway(make_settings())
        entry = Catalog().lookup("poster-8x10")
        params = gateway.build_session_params(entry=entry, image_ref=ASSET_REF, return_url="https://x/y")

        line_item = params["line_items"][0]
        assert line_item["quantity"] == 1
        assert line_item["price_data"]["currency"] == "usd"
        assert line_item["price_data"]["unit_amount"] == 2900
        assert line_item["price_data"]["product_data"]["name"] == entry.name
        assert params["mode"] == "payment"
        assert params["shipping_address_collection"]["allowed_countries"] == [
            "US", "CA", "GB", "AU", "DE", "FR", "IT", "ES", "NL", "BE",
        ]
        assert params["metadata"] == {"productId": "poster-8x10", "prodigiAssetId": "asset_42"}

    @pytest.mark.unit
    def test_marketing_image_optional(self):
        gateway = StripeCheckoutGateway(make_settings(product_image_url=""))
        entry = Catalog().lookup("poster-8x10")
        params = gateway.build_session_params(entry=entry, image_ref=ASSET_REF, return_url="https://x/y")
        assert "images" not in params["line_items"][0]["price_data"]["product_data"]


class TestCreateSession:

    @pytest.mark.asyncio
    async def test_returns_id_and_url(self):
        client = _mock_client(SimpleNamespace(id="cs_test_abc", url="https://checkout.stripe.com/c/pay/cs_test_abc"))
        gateway = StripeCheckoutGateway(make_settings(), client=client)

        session = await gateway.create_session(
            entry=Catalog().lookup("mini-print"),
            image_ref=ASSET_REF,
            return_url="https://x/y",
        )

        assert session.id == "cs_test_abc"
        assert session.url.endswith("cs_test_abc")
        params = client.v1.checkout.sessions.create_async.call_args.kwargs["params"]
        assert params["metadata"]["productId"] == "mini-print"

    @pytest.mark.asyncio
    async def test_stripe_error_translated(self):
        client = _mock_client(side_effect=stripe.APIConnectionError("network down"))
        gateway = StripeCheckoutGateway(make_settings(), client=client)

        with pytest.raises(PaymentGatewayError):
            await gateway.create_session(
                entry=Catalog().lookup("mini-print"),
                image_ref=ASSET_REF,
                return_url="https://x/y",
            )

    @pytest.mark.asyncio
    async def test_missing_secret_key(self):
        gateway = StripeCheckoutGateway(make_settings(stripe_secret_key=""))
        with pytest.raises(PaymentGatewayError) as exc_info:
            await gateway.create_session(
                entry=Catalog().lookup("mini-print"),
                image_ref=ASSET_REF,
                return_url="https://x/y",
            )
        assert "STRIPE_SECRET_KEY" in exc_info.value.message
