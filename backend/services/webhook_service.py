"""
Stripe webhook verification.

Stripe signs every notification with the endpoint's signing secret:

    Stripe-Signature: t=<unix ts>,v1=<hex HMAC-SHA256(secret, "<ts>.<raw body>")>

Verification must run over the raw request bytes, never a re-serialised
body. Fails closed: no secret configured means every webhook is rejected.
"""
import json
import logging
from typing import Optional

import stripe
from pydantic import ValidationError as PydanticValidationError

from models import PaymentEvent

logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    """The notification is not authentic (or is stale) and must be dropped."""
    pass


class WebhookVerifier:
    def __init__(self, secret: str, tolerance: int = 300):
        self.secret = secret
        self.tolerance = tolerance

    def verify(self, raw_body: bytes, signature_header: Optional[str]) -> PaymentEvent:
        """
        Authenticate a notification and parse it.

        Raises:
            WebhookSignatureError: missing secret/header, signature mismatch,
                timestamp outside the tolerance window, or a signed body that
                is not a Stripe event
        """
        if not self.secret:
            logger.error(
                "STRIPE_WEBHOOK_SECRET not configured — rejecting webhook. "
                "Set STRIPE_WEBHOOK_SECRET in .env to accept Stripe webhooks."
            )
            raise WebhookSignatureError("Webhook signing secret not configured")

        if not signature_header:
            logger.warning("Webhook received without signature header")
            raise WebhookSignatureError("Missing Stripe-Signature header")

        try:
            stripe.WebhookSignature.verify_header(
                raw_body,
                signature_header,
                self.secret,
                tolerance=self.tolerance,
            )
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(str(e))
        except UnicodeDecodeError:
            raise WebhookSignatureError("Webhook body is not valid UTF-8")

        try:
            return PaymentEvent.model_validate(json.loads(raw_body))
        except (ValueError, PydanticValidationError) as e:
            # json.JSONDecodeError is a ValueError
            raise WebhookSignatureError(f"Invalid payload: {e}")
