"""
Checkout endpoint — starts a Stripe Checkout session for one print.

    POST /create-checkout  {productId, imageData, returnUrl} → {sessionId, url}

Client errors (unknown product, missing/invalid image, bad returnUrl) are
400s; asset-host or Stripe failures are 500s. Both carry {error, code}.
"""
import logging

from fastapi import APIRouter, Depends

from deps import get_checkout_service
from models import CreateCheckoutRequest, CreateCheckoutResponse, ErrorResponse
from services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])


@router.post(
    "/create-checkout",
    response_model=CreateCheckoutResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_checkout(
    req: CreateCheckoutRequest,
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Validate, stage the image, and create the hosted payment page."""
    result = await checkout.create_checkout(
        product_id=req.product_id,
        image_data=req.image_data,
        return_url=req.return_url,
    )
    return CreateCheckoutResponse(sessionId=result["sessionId"], url=result["url"])
