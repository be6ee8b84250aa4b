# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_event_store, get_payment_gateway
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import PaymentIntentIn, PaymentIntentOut, WebhookAck
from storefront.payments.port import PaymentGateway
from storefront.services.payment_service import PaymentService
from storefront.services.webhook_event_store import WebhookEventStore

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/intent", response_model=PaymentIntentOut)
def create_payment_intent(
    payload: PaymentIntentIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    event_store: WebhookEventStore = Depends(get_event_store),
):
    svc = PaymentService(db, gateway=gateway, event_store=event_store)
    return svc.create_payment_intent(
        user_id=user.id,
        order_id=payload.order_id,
        payment_method_type=payload.payment_method_type,
        receipt_email=payload.receipt_email or user.email,
    )


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    event_store: WebhookEventStore = Depends(get_event_store),
):
    """
    Webhook procesora platnosci, podpis liczony z surowego body.
    """
    if not stripe_signature:
        raise HTTPException(status_code=400, detail="Missing Stripe-Signature header")

    payload = await request.body()
    svc = PaymentService(db, gateway=gateway, event_store=event_store)
    return await run_in_threadpool(svc.handle_webhook, payload, stripe_signature)
