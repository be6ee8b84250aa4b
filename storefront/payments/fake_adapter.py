"""Fake payment gateway for development and tests.

No external calls. Signatures are accepted when equal to ``signature``
(default "test-signature"); the payload is a Stripe-shaped JSON event.
"""

import json
from uuid import uuid4

from storefront.domain.errors import PaymentGatewayError, WebhookSignatureError
from storefront.payments.port import PaymentGateway, PaymentIntentResult, WebhookEvent


class FakeGateway(PaymentGateway):
    def __init__(self, signature: str = "test-signature") -> None:
        self.signature = signature
        self.should_succeed: bool = True
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool) -> None:
        self.should_succeed = should_succeed

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        payment_method_type: str,
        receipt_email: str | None,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_cents": amount_cents,
                "currency": currency,
                "metadata": metadata,
                "payment_method_type": payment_method_type,
                "receipt_email": receipt_email,
                "idempotency_key": idempotency_key,
            }
        )
        if not self.should_succeed:
            raise PaymentGatewayError("Failed to create payment intent")

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        return PaymentIntentResult(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            status="requires_payment_method",
        )

    def construct_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != self.signature:
            raise WebhookSignatureError()
        try:
            event = json.loads(payload)
            obj = event["data"]["object"]
            return WebhookEvent(
                id=event["id"],
                type=event["type"],
                object_id=obj.get("id"),
                metadata=dict(obj.get("metadata") or {}),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise WebhookSignatureError("Invalid webhook payload") from e
