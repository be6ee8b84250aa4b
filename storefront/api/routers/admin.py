# storefront/api/routers/admin.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.enums import OrderStatus
from storefront.domain.schemas import (
    BannerCreate,
    BannerOut,
    BannerUpdate,
    CategoryCreate,
    CategoryOut,
    OrderOut,
    OrderStatusUpdate,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    UserCreate,
    UserRead,
    UserUpdate,
)
from storefront.services.banner_service import BannerService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

# caly router tylko dla ADMIN
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# =====================================================
# PRODUCTS / CATEGORIES
# =====================================================
@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return CatalogService(db).create_product(payload)


@router.patch("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_product(product_id, payload)


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_product(product_id)
    return Response(status_code=204)


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return CatalogService(db).create_category(payload)


# =====================================================
# ORDERS
# =====================================================
@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    status: Optional[OrderStatus] = None,
    sort_by: Literal["created_at", "total", "id"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    return OrderService(db).list_all_orders(status=status, sort_by=sort_by, sort_order=sort_order)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_any_order(order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    return OrderService(db).update_status(order_id, payload.status)


# =====================================================
# USERS
# =====================================================
@router.get("/users", response_model=List[UserRead])
def list_users(db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.post("/users", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).create_user(payload)


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).get_user(user_id)


@router.patch("/users/{user_id}", response_model=UserRead)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    return UserService(db).update_user(user_id, payload)


# =====================================================
# BANNERS
# =====================================================
@router.post("/banners", response_model=BannerOut, status_code=201)
def create_banner(payload: BannerCreate, db: Session = Depends(get_db)):
    return BannerService(db).create_banner(payload)


@router.patch("/banners/{banner_id}", response_model=BannerOut)
def update_banner(banner_id: int, payload: BannerUpdate, db: Session = Depends(get_db)):
    return BannerService(db).update_banner(banner_id, payload)


@router.delete("/banners/{banner_id}", status_code=204)
def delete_banner(banner_id: int, db: Session = Depends(get_db)):
    BannerService(db).delete_banner(banner_id)
    return Response(status_code=204)
