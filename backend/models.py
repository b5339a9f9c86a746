"""
Pydantic models for request/response validation.

Three families:
  - HTTP API models (checkout request/response, product list, errors)
  - Stripe webhook payloads (only the fields fulfillment reads)
  - Prodigi order payloads (serialised with camelCase aliases)
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class APIBase(BaseModel):
    """Shared base: allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── API Models ──────────────────────────────────────────────────────

class CreateCheckoutRequest(APIBase):
    """
    Request body for POST /create-checkout.

    Fields are optional at the schema level so that a missing product or
    image is reported as a 400 with a readable message instead of a 422.
    """
    product_id: Optional[str] = Field(None, alias="productId")
    image_data: Optional[str] = Field(
        None,
        alias="imageData",
        description="Base64 image (bare or data: URL), or an http(s) URL for the url strategy",
    )
    return_url: Optional[str] = Field(None, alias="returnUrl")


class CreateCheckoutResponse(APIBase):
    session_id: str = Field(..., alias="sessionId")
    url: str


class ProductSummary(APIBase):
    id: str
    name: str
    price: float = Field(..., description="Price in major currency units")


class ErrorResponse(APIBase):
    error: str
    code: str


class WebhookAck(APIBase):
    received: bool = True


# ── Stripe Webhook Payloads ─────────────────────────────────────────

class StripeAddress(APIBase):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class ShippingDetails(APIBase):
    name: Optional[str] = None
    address: Optional[StripeAddress] = None

    @property
    def is_complete(self) -> bool:
        return bool(
            self.name
            and self.address
            and self.address.line1
            and self.address.country
        )


class CollectedInformation(APIBase):
    shipping_details: Optional[ShippingDetails] = None


class CheckoutSessionPayload(APIBase):
    """The data.object of a checkout.session.* event."""
    id: str
    metadata: Optional[Dict[str, Any]] = None
    shipping_details: Optional[ShippingDetails] = None
    collected_information: Optional[CollectedInformation] = None
    customer_details: Optional[ShippingDetails] = None
    payment_status: Optional[str] = None

    @property
    def shipping(self) -> Optional[ShippingDetails]:
        """
        Shipping name/address.

        Older API versions put it on shipping_details; newer ones under
        collected_information. customer_details is the last resort.
        """
        candidates = [
            self.shipping_details,
            self.collected_information.shipping_details if self.collected_information else None,
            self.customer_details,
        ]
        for candidate in candidates:
            if candidate is not None and candidate.is_complete:
                return candidate
        return None


class EventData(APIBase):
    object: Dict[str, Any] = Field(default_factory=dict)


class PaymentEvent(APIBase):
    """A verified Stripe event."""
    id: str = ""
    type: str
    data: EventData = Field(default_factory=EventData)


# ── Prodigi Order Payloads ──────────────────────────────────────────

class ProdigiAddress(APIBase):
    line1: str
    line2: str = ""
    postal_or_zip_code: str = Field("", alias="postalOrZipCode")
    town_or_city: str = Field("", alias="townOrCity")
    state_or_county: str = Field("", alias="stateOrCounty")
    country_code: str = Field(..., alias="countryCode")


class ProdigiRecipient(APIBase):
    name: str
    address: ProdigiAddress


class ProdigiAsset(APIBase):
    print_area: str = Field("default", alias="printArea")
    id: Optional[str] = None
    url: Optional[str] = None


class ProdigiItem(APIBase):
    sku: str
    copies: int = 1
    attributes: Dict[str, str] = Field(default_factory=dict)
    assets: List[ProdigiAsset]


class FulfillmentOrder(APIBase):
    merchant_reference: Optional[str] = Field(None, alias="merchantReference")
    shipping_method: str = Field("Standard", alias="shippingMethod")
    recipient: ProdigiRecipient
    items: List[ProdigiItem]

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
