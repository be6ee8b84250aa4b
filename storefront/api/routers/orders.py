# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import OrderCreate, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z koszyka uzytkownika.
    Wysyla powiadomienie asynchronicznie.
    """
    return get_service(db).place_order_from_checkout(user.id, payload)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(user.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegoly zamowienia.
    """
    return get_service(db).get_order(user.id, order_id)
