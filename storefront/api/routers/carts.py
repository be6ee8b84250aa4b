# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CartItemIn, CartItemUpdate, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Koszyk zalogowanego uzytkownika, tworzony przy pierwszym odczycie."""
    return get_service(db).get_cart(user.id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).add_item(
        user_id=user.id,
        product_id=payload.product_id,
        quantity=payload.quantity,
    )


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(user.id, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_item(user.id, item_id)


@router.post("/clear", response_model=CartOut)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).clear_cart(user.id)
