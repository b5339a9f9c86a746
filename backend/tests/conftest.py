"""
Pytest configuration and shared fixtures for Baroque Print API tests.

Provides settings, fake Stripe/Prodigi collaborators, the real services
wired on top of them, and an httpx client bound to the FastAPI app with
its dependencies overridden.

Fixtures `image_strategy` and `dedupe` can be overridden per module or
class to exercise the other staging strategies / replay protection.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from deps import (
    get_catalog,
    get_checkout_service,
    get_fulfillment_dispatcher,
    get_settings,
    get_webhook_verifier,
)
from domain.catalog import Catalog
from services.checkout_service import CheckoutService
from services.fulfillment_service import FulfillmentDispatcher
from services.image_stager import build_image_stager
from services.kv_store import InMemoryTTLStore
from services.webhook_service import WebhookVerifier
from tests.helpers import FakeCheckoutGateway, FakeProdigi, make_settings


# ── Configuration Fixtures ───────────────────────────────────────────


@pytest.fixture
def image_strategy() -> str:
    return "upload"


@pytest.fixture
def dedupe() -> bool:
    return False


@pytest.fixture
def test_settings(image_strategy, dedupe):
    return make_settings(image_strategy=image_strategy, dedupe_completed_sessions=dedupe)


# ── Collaborator Fixtures ────────────────────────────────────────────


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def fake_prodigi() -> FakeProdigi:
    return FakeProdigi()


@pytest.fixture
def fake_gateway(test_settings) -> FakeCheckoutGateway:
    return FakeCheckoutGateway(test_settings)


@pytest.fixture
def image_store(test_settings) -> InMemoryTTLStore:
    return InMemoryTTLStore(test_settings.image_ttl_seconds)


@pytest.fixture
def stager(test_settings, fake_prodigi, image_store):
    return build_image_stager(test_settings, fake_prodigi, image_store)


# ── Service Fixtures ─────────────────────────────────────────────────


@pytest.fixture
def checkout_service(catalog, stager, fake_gateway) -> CheckoutService:
    return CheckoutService(catalog=catalog, stager=stager, gateway=fake_gateway)


@pytest.fixture
def dispatcher(test_settings, catalog, stager, fake_prodigi) -> FulfillmentDispatcher:
    processed = (
        InMemoryTTLStore(test_settings.processed_session_ttl_seconds)
        if test_settings.dedupe_completed_sessions
        else None
    )
    return FulfillmentDispatcher(
        catalog=catalog,
        stager=stager,
        prodigi=fake_prodigi,
        shipping_method=test_settings.prodigi_shipping_method,
        processed_sessions=processed,
    )


@pytest.fixture
def verifier(test_settings) -> WebhookVerifier:
    return WebhookVerifier(
        secret=test_settings.stripe_webhook_secret,
        tolerance=test_settings.stripe_webhook_tolerance,
    )


# ── App Client ───────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(test_settings, catalog, checkout_service, dispatcher, verifier):
    """
    httpx client against the FastAPI app.

    Background tasks (fulfillment) complete before the response is
    returned, so assertions can run right after the request.
    """
    from main import app

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    app.dependency_overrides[get_fulfillment_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_webhook_verifier] = lambda: verifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
