# storefront/api/deps.py
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.enums import UserRole
from storefront.payments import get_gateway
from storefront.payments.port import PaymentGateway
from storefront.services.webhook_event_store import WebhookEventStore
from storefront.utils.security import decode_token

security = HTTPBearer(auto_error=False)


def _resolve_user(token: str, db: Session) -> UserModel:
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid access token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.get(UserModel, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> UserModel:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return _resolve_user(creds.credentials, db)


def get_optional_user(
    creds: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> UserModel | None:
    # publiczne endpointy: brak tokenu = anonim, zly token = 401
    if not creds:
        return None
    return _resolve_user(creds.credentials, db)


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user


def get_payment_gateway() -> PaymentGateway:
    return get_gateway()


def get_event_store() -> WebhookEventStore:
    return WebhookEventStore()
