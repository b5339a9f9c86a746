"""
Checkout Service — validate → stage image → create Stripe session.

Client input errors are raised before any external call. Any upstream
failure short-circuits the request; an image that was already staged is
left to expire from its store (or the asset host) if Stripe then fails.
"""
import logging

from domain.catalog import Catalog
from domain.errors import InvalidProductError, PaymentProviderError
from exceptions import PaymentGatewayError
from services.image_stager import ImageStager
from services.stripe_service import StripeCheckoutGateway
from utils.validators import require_image_data, validate_return_url

logger = logging.getLogger(__name__)


class CheckoutService:
    def __init__(self, catalog: Catalog, stager: ImageStager, gateway: StripeCheckoutGateway):
        self.catalog = catalog
        self.stager = stager
        self.gateway = gateway

    async def create_checkout(
        self,
        product_id: str | None,
        image_data: str | None,
        return_url: str | None,
    ) -> dict:
        """
        Start a checkout for one catalog product.

        Returns:
            dict: {sessionId, url}

        Raises:
            InvalidProductError(400), MissingImageError(400), InvalidImageError(400),
            ValidationError(400), ImagePreparationError(500), PaymentProviderError(500)
        """
        entry = self.catalog.lookup(product_id)
        if entry is None:
            raise InvalidProductError(product_id)

        image_data = require_image_data(image_data)
        return_url = validate_return_url(return_url)

        logger.info(f"Creating checkout for: {entry.id}")
        logger.info(f"Image data length: {len(image_data)}")

        image_ref = await self.stager.stage(image_data)

        try:
            session = await self.gateway.create_session(
                entry=entry,
                image_ref=image_ref,
                return_url=return_url,
            )
        except PaymentGatewayError as e:
            raise PaymentProviderError(details={"reason": e.message})

        logger.info(f"Checkout created: {session.id} with {image_ref.kind.value}: {image_ref.value}")
        return {"sessionId": session.id, "url": session.url}
