"""Payment gateway port.

Contract every payment provider adapter implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentIntentResult:
    intent_id: str
    client_secret: str
    status: str


@dataclass(frozen=True)
class WebhookEvent:
    """Provider event reduced to what order handling needs."""

    id: str
    type: str
    object_id: str | None = None
    metadata: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    @abstractmethod
    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict,
        payment_method_type: str,
        receipt_email: str | None,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        """Ask the provider for a client-side confirmation handle."""
        ...

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify the signature and parse the event.

        Raises WebhookSignatureError when the payload is not authentic.
        """
        ...
