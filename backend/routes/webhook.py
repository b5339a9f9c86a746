"""
Stripe webhook endpoint.

    POST /webhook  raw body + Stripe-Signature header

The body is read raw (never parsed before verification). Signature
failures are answered with a 400 plain-text error and nothing is
processed. Every verified event is acknowledged with {"received": true};
only checkout.session.completed schedules fulfillment.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from deps import get_fulfillment_dispatcher, get_webhook_verifier
from domain.constants import CHECKOUT_COMPLETED_EVENT
from models import CheckoutSessionPayload, WebhookAck
from services.fulfillment_service import FulfillmentDispatcher
from services.webhook_service import WebhookSignatureError, WebhookVerifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    dispatcher: FulfillmentDispatcher = Depends(get_fulfillment_dispatcher),
):
    body = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        event = verifier.verify(body, signature)
    except WebhookSignatureError as e:
        logger.error(f"Webhook sig error: {e}")
        return PlainTextResponse(f"Webhook Error: {e}", status_code=400)

    if event.type != CHECKOUT_COMPLETED_EVENT:
        logger.debug(f"Stripe webhook type ignored: {event.type}")
        return WebhookAck()

    try:
        session = CheckoutSessionPayload.model_validate(event.data.object)
    except PydanticValidationError as e:
        logger.error(f"Completed event {event.id} has no usable session object: {e}")
        return WebhookAck()

    # Runs after the response is sent; the outcome is only logged
    background_tasks.add_task(dispatcher.fulfill, session)
    return WebhookAck()
