"""
Shared FastAPI dependencies.

Services are built once per process from the global settings and handed to
routers through Depends(), so tests can swap any of them via
app.dependency_overrides.
"""

from __future__ import annotations

from functools import lru_cache

from config import Settings, settings
from domain.catalog import Catalog, catalog
from services.checkout_service import CheckoutService
from services.fulfillment_service import FulfillmentDispatcher
from services.image_stager import ImageStager, build_image_stager
from services.kv_store import InMemoryTTLStore
from services.prodigi_service import ProdigiClient
from services.stripe_service import StripeCheckoutGateway
from services.webhook_service import WebhookVerifier


def get_settings() -> Settings:
    return settings


def get_catalog() -> Catalog:
    return catalog


@lru_cache
def get_prodigi_client() -> ProdigiClient:
    return ProdigiClient.from_settings(settings)


@lru_cache
def get_image_stager() -> ImageStager:
    # Shared by checkout (stage) and fulfillment (resolve/release)
    return build_image_stager(settings, get_prodigi_client())


@lru_cache
def get_checkout_service() -> CheckoutService:
    return CheckoutService(
        catalog=catalog,
        stager=get_image_stager(),
        gateway=StripeCheckoutGateway(settings),
    )


@lru_cache
def get_fulfillment_dispatcher() -> FulfillmentDispatcher:
    processed = (
        InMemoryTTLStore(settings.processed_session_ttl_seconds)
        if settings.dedupe_completed_sessions
        else None
    )
    return FulfillmentDispatcher(
        catalog=catalog,
        stager=get_image_stager(),
        prodigi=get_prodigi_client(),
        shipping_method=settings.prodigi_shipping_method,
        processed_sessions=processed,
    )


def get_webhook_verifier() -> WebhookVerifier:
    return WebhookVerifier(
        secret=settings.stripe_webhook_secret,
        tolerance=settings.stripe_webhook_tolerance,
    )
