"""Stripe payment gateway adapter (stripe-python SDK)."""

import json

import stripe

from storefront.domain.errors import PaymentGatewayError, WebhookSignatureError
from storefront.payments.port import PaymentGateway, PaymentIntentResult, WebhookEvent
from storefront.utils.logging import get_logger
from storefront.utils.retry import stripe_retry

logger = get_logger(__name__)


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    @stripe_retry()
    def _create_intent(self, **params) -> stripe.PaymentIntent:
        return stripe.PaymentIntent.create(api_key=self.api_key, **params)

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        payment_method_type: str,
        receipt_email: str | None,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        params = {
            "amount": amount_cents,
            "currency": currency,
            "metadata": metadata,
            "payment_method_types": [payment_method_type],
            "idempotency_key": idempotency_key,
        }
        if receipt_email:
            params["receipt_email"] = receipt_email

        try:
            intent = self._create_intent(**params)
        except stripe.StripeError as e:
            logger.error("Stripe PaymentIntent.create failed", error=str(e), metadata=metadata)
            raise PaymentGatewayError("Failed to create payment intent") from e

        return PaymentIntentResult(
            intent_id=intent["id"],
            client_secret=intent["client_secret"],
            status=intent["status"],
        )

    def construct_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")

        try:
            stripe.WebhookSignature.verify_header(
                payload, signature, self.webhook_secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE
            )
            # podpis sprawdzony, dalej zwykly dict z surowego JSON
            event = json.loads(payload)
            obj = event["data"]["object"]
            return WebhookEvent(
                id=event["id"],
                type=event["type"],
                object_id=obj.get("id"),
                metadata=dict(obj.get("metadata") or {}),
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Webhook signature verification failed", error=str(e))
            raise WebhookSignatureError() from e
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Invalid webhook payload", error=str(e))
            raise WebhookSignatureError("Invalid webhook payload") from e
