"""
Fulfillment Service — completed Stripe session → Prodigi order.

Handles:
    1. Rebuilding the order from session metadata + shipping details
    2. Resolving buffered images and uploading them inline
    3. Submitting the order to Prodigi
    4. Reporting the outcome as a FulfillmentResult (never raising)

Every failure here is terminal: nothing is retried or re-queued, and the
paying customer never sees it. The webhook handler acknowledges Stripe
regardless of the result.

Replays: unless DEDUPE_COMPLETED_SESSIONS is on, each verified
checkout.session.completed event is treated as fresh, so a replayed
notification submits a second Prodigi order. With it on, the session is
claimed before submission, so a concurrent duplicate delivery is skipped;
a failed attempt drops the claim so a later redelivery can retry.
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from domain.catalog import Catalog, CatalogEntry
from domain.constants import METADATA_PRODUCT_ID, PRODIGI_PRINT_AREA
from domain.enums import FulfillmentErrorKind, ImageReferenceKind
from exceptions import AssetUploadError, FulfillmentAPIError
from models import (
    CheckoutSessionPayload,
    FulfillmentOrder,
    ProdigiAddress,
    ProdigiAsset,
    ProdigiItem,
    ProdigiRecipient,
    ShippingDetails,
)
from services.image_stager import ImageReference, ImageStager
from services.kv_store import KeyValueStore
from services.prodigi_service import ProdigiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FulfillmentError:
    kind: FulfillmentErrorKind
    message: str
    payload: Optional[Any] = None


@dataclass(frozen=True)
class FulfillmentResult:
    session_id: str
    order_id: Optional[str] = None
    error: Optional[FulfillmentError] = None

    @property
    def ok(self) -> bool:
        return self.order_id is not None and self.error is None


# Placeholder recorded while a session's order is being submitted
_IN_FLIGHT = "in_flight"


class _Abort(Exception):
    """Internal short-circuit carrying the terminal error."""

    def __init__(self, error: FulfillmentError):
        super().__init__(error.message)
        self.error = error


def build_fulfillment_order(
    *,
    session_id: str,
    entry: CatalogEntry,
    shipping: ShippingDetails,
    asset: ProdigiAsset,
    shipping_method: str = "Standard",
) -> FulfillmentOrder:
    """Map a catalog entry + Stripe shipping details to a Prodigi order."""
    address = shipping.address
    return FulfillmentOrder(
        merchant_reference=session_id,
        shipping_method=shipping_method,
        recipient=ProdigiRecipient(
            name=shipping.name,
            address=ProdigiAddress(
                line1=address.line1,
                line2=address.line2 or "",
                postal_or_zip_code=address.postal_code or "",
                town_or_city=address.city or "",
                state_or_county=address.state or "",
                country_code=address.country,
            ),
        ),
        items=[
            ProdigiItem(
                sku=entry.fulfillment_sku,
                copies=entry.quantity or 1,
                attributes=dict(entry.attributes),
                assets=[asset],
            )
        ],
    )


class FulfillmentDispatcher:
    def __init__(
        self,
        catalog: Catalog,
        stager: ImageStager,
        prodigi: ProdigiClient,
        shipping_method: str = "Standard",
        processed_sessions: Optional[KeyValueStore] = None,
    ):
        self.catalog = catalog
        self.stager = stager
        self.prodigi = prodigi
        self.shipping_method = shipping_method
        # Set only when DEDUPE_COMPLETED_SESSIONS is enabled
        self.processed_sessions = processed_sessions

    async def fulfill(self, session: CheckoutSessionPayload) -> FulfillmentResult:
        """Place the Prodigi order for a completed checkout session."""
        metadata = session.metadata or {}
        product_id = metadata.get(METADATA_PRODUCT_ID)
        image_ref = ImageReference.from_metadata(metadata)
        shipping = session.shipping

        logger.info("=== FULFILLING ORDER ===")
        logger.info(f"Session: {session.id}")
        logger.info(f"Product: {product_id}")
        logger.info(f"Image: {image_ref.kind.value + ':' + image_ref.value if image_ref else None}")
        logger.info(
            f"Ship to: {shipping.name if shipping else None}, "
            f"{shipping.address.city if shipping else None}"
        )

        if self.processed_sessions is not None and self.processed_sessions.get(session.id):
            logger.warning(f"Session {session.id} already fulfilled or in flight, skipping replay")
            return FulfillmentResult(
                session_id=session.id,
                error=FulfillmentError(FulfillmentErrorKind.DUPLICATE, "Session already fulfilled"),
            )

        # Claimed before the first await so a concurrent delivery sees it
        if self.processed_sessions is not None:
            self.processed_sessions.put(session.id, _IN_FLIGHT)

        succeeded = False

        try:
            order_id = await self._dispatch(session, product_id, image_ref, shipping)
            succeeded = True
        except _Abort as abort:
            error = abort.error
            logger.error(
                f"❌ PRODIGI ORDER FAILED for {session.id} [{error.kind.value}]: {error.message} "
                f"{json.dumps(error.payload, default=str) if error.payload is not None else ''}"
            )
            return FulfillmentResult(session_id=session.id, error=error)
        except Exception as e:
            logger.exception(f"❌ Fulfillment error for {session.id}: {e}")
            return FulfillmentResult(
                session_id=session.id,
                error=FulfillmentError(FulfillmentErrorKind.INTERNAL_ERROR, str(e)),
            )
        finally:
            if image_ref is not None and image_ref.kind == ImageReferenceKind.HANDLE:
                self.stager.release(image_ref.value)
            if not succeeded and self.processed_sessions is not None:
                self.processed_sessions.delete(session.id)

        if self.processed_sessions is not None:
            self.processed_sessions.put(session.id, order_id)

        logger.info(f"✅ PRODIGI ORDER CREATED: {order_id}")
        return FulfillmentResult(session_id=session.id, order_id=order_id)

    async def _dispatch(
        self,
        session: CheckoutSessionPayload,
        product_id: Optional[str],
        image_ref: Optional[ImageReference],
        shipping: Optional[ShippingDetails],
    ) -> str:
        if image_ref is None:
            raise _Abort(FulfillmentError(
                FulfillmentErrorKind.MISSING_IMAGE_REFERENCE,
                "No image reference in session metadata",
                payload=session.metadata,
            ))

        entry = self.catalog.lookup(product_id)
        if entry is None:
            raise _Abort(FulfillmentError(
                FulfillmentErrorKind.UNKNOWN_PRODUCT,
                f"Unknown product: {product_id}",
            ))

        if shipping is None:
            raise _Abort(FulfillmentError(
                FulfillmentErrorKind.MISSING_SHIPPING,
                "Session has no usable shipping name/address",
            ))

        asset = await self._resolve_asset(image_ref)
        order = build_fulfillment_order(
            session_id=session.id,
            entry=entry,
            shipping=shipping,
            asset=asset,
            shipping_method=self.shipping_method,
        )
        payload = order.to_payload()
        logger.info(f"Sending to Prodigi: {json.dumps(payload, indent=2)}")

        try:
            return await self.prodigi.create_order(payload)
        except FulfillmentAPIError as e:
            kind = (
                FulfillmentErrorKind.UPSTREAM_UNAVAILABLE
                if e.payload is None
                else FulfillmentErrorKind.ORDER_REJECTED
            )
            raise _Abort(FulfillmentError(kind, e.message, payload=e.payload))

    async def _resolve_asset(self, image_ref: ImageReference) -> ProdigiAsset:
        if image_ref.kind == ImageReferenceKind.ASSET:
            return ProdigiAsset(print_area=PRODIGI_PRINT_AREA, id=image_ref.value)
        if image_ref.kind == ImageReferenceKind.URL:
            return ProdigiAsset(print_area=PRODIGI_PRINT_AREA, url=image_ref.value)

        image_bytes = self.stager.resolve(image_ref.value)
        if not image_bytes:
            raise _Abort(FulfillmentError(
                FulfillmentErrorKind.IMAGE_NOT_FOUND,
                f"No staged image for {image_ref.value}",
            ))
        try:
            asset_id = await self.prodigi.upload_asset(base64.b64encode(image_bytes).decode("ascii"))
        except AssetUploadError as e:
            raise _Abort(FulfillmentError(
                FulfillmentErrorKind.ASSET_UPLOAD_FAILED,
                e.message,
                payload=e.payload,
            ))
        return ProdigiAsset(print_area=PRODIGI_PRINT_AREA, id=asset_id)
