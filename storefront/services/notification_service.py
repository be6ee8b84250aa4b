# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MESSAGES = {
    "placed": "Order {order_id} has been placed",
    "paid": "Payment received, order {order_id} is being processed",
    "payment_failed": "Payment failed, order {order_id} was canceled",
}


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, event: str):
        send_order_notification_task.delay(user_id, order_id, event)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, event: str):
    """
    Celery task - tu bylby email/push, na razie tylko log.
    """
    message = MESSAGES.get(event, "Order {order_id} updated").format(order_id=order_id)
    logger.info(f"[NOTIFICATION] User {user_id}: {message}")

    return {"user_id": user_id, "order_id": order_id, "event": event, "status": "sent"}
