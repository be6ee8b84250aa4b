# storefront/services/payment_service.py
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from storefront.domain.enums import OrderStatus, PaymentMethodType
from storefront.domain.errors import InvalidRequestError, InvalidStatusTransitionError, NotFoundError
from storefront.payments import get_gateway
from storefront.payments.port import PaymentGateway, WebhookEvent
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.webhook_event_store import WebhookEventStore
from storefront.utils.logging import get_logger
from storefront.utils.settings import PAYMENT_CURRENCY

logger = get_logger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    """
    Most do zewnetrznego procesora platnosci:
    - utworzenie payment intent dla zamowienia PENDING
    - obsluga webhooka (sukces -> PROCESSING, porazka -> CANCELED)
    """

    def __init__(
        self,
        db: Session,
        gateway: PaymentGateway | None = None,
        event_store: WebhookEventStore | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.gateway = gateway or get_gateway()
        self.event_store = event_store or WebhookEventStore()
        self.notification_service = notification_service or NotificationService()
        self.orders = OrderService(db, notification_service=self.notification_service)

    def create_payment_intent(
        self,
        user_id: int,
        order_id: int,
        payment_method_type: PaymentMethodType = PaymentMethodType.CARD,
        receipt_email: str | None = None,
    ) -> dict:
        order = self.orders.get_order(user_id, order_id)

        if order.status != OrderStatus.PENDING.value:
            raise InvalidRequestError("Order has already been processed")

        intent = self.gateway.create_payment_intent(
            amount_cents=to_cents(order.total),
            currency=PAYMENT_CURRENCY,
            metadata={"order_id": str(order.id), "user_id": str(user_id)},
            payment_method_type=payment_method_type.value,
            receipt_email=receipt_email,
            idempotency_key=f"order-{order.id}-intent",
        )

        try:
            order.payment_intent_id = intent.intent_id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Payment intent {intent.intent_id} created for order {order.id}")
        return {"client_secret": intent.client_secret, "payment_intent_id": intent.intent_id}

    def handle_webhook(self, payload: bytes, signature: str) -> dict:
        event = self.gateway.construct_event(payload, signature)

        if not self.event_store.claim(event.id):
            logger.info(f"Webhook event {event.id} already processed, skipping")
            return {"received": True}

        try:
            self._dispatch(event)
        except Exception:
            self.event_store.release(event.id)
            raise

        self.event_store.mark_done(event.id)
        return {"received": True}

    def _dispatch(self, event: WebhookEvent) -> None:
        if event.type not in (PAYMENT_SUCCEEDED, PAYMENT_FAILED):
            logger.info(f"Unhandled event type {event.type}")
            return

        raw_order_id = event.metadata.get("order_id")
        if not raw_order_id:
            logger.warning(f"Event {event.id} ({event.type}) has no order_id metadata")
            return

        try:
            order_id = int(raw_order_id)
            if event.type == PAYMENT_SUCCEEDED:
                order = self.orders.mark_paid(order_id)
                logger.info(f"Payment succeeded for order {order_id}")
                self.orders.notify(order, "paid")
            else:
                order = self.orders.mark_payment_failed(order_id)
                logger.info(f"Payment failed for order {order_id}")
                self.orders.notify(order, "payment_failed")
        except (ValueError, NotFoundError, InvalidStatusTransitionError) as e:
            # event nie pasuje do zadnego zamowienia albo przyszedl za pozno, potwierdzamy odbior
            logger.warning(f"Ignoring {event.type} for order {raw_order_id}: {e}")
