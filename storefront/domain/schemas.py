# storefront/domain/schemas.py
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storefront.domain.enums import (
    BannerPosition,
    OrderStatus,
    PaymentMethodType,
    TargetAudience,
    UserRole,
)

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def _required(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # daty bez strefy traktujemy jako UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =====================================================
# CART
# =====================================================
class CartItemIn(BaseModel):
    """Dodanie produktu do koszyka."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1)


class CartProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    images: List[str]
    stock: int


class CartItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    product: CartProductOut


class CartOut(BaseModel):
    """Koszyk, subtotal i total_items sa zawsze liczone przy odczycie."""

    id: int
    items: List[CartItemOut]
    subtotal: Decimal
    total_items: int


# =====================================================
# ADDRESSES
# =====================================================
class AddressIn(BaseModel):
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool = False

    @field_validator("street", "city", "state", "postal_code", "country")
    @classmethod
    def not_blank(cls, v: str, info):
        return _required(v, info.field_name.replace("_", " ").capitalize())


class AddressOut(BaseModel):
    id: int
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# CHECKOUT / ORDERS
# =====================================================
class ShippingInfoIn(BaseModel):
    """
    Dane wysylki z formularza checkoutu, walidowane tez po stronie serwera.
    Zapisywany jest tylko adres; imie, nazwisko i telefon nie trafiaja do bazy,
    a email klient przekazuje dalej jako receipt_email przy platnosci.
    """

    first_name: str
    last_name: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    email: str
    phone: str

    @field_validator("first_name", "last_name", "street", "city", "state", "postal_code", "country", "phone")
    @classmethod
    def not_blank(cls, v: str, info):
        return _required(v, info.field_name.replace("_", " ").capitalize())

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str):
        v = _required(v, "Email")
        if not EMAIL_RE.fullmatch(v):
            raise ValueError("Email is invalid")
        return v

    def to_address(self) -> AddressIn:
        return AddressIn(
            street=self.street,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
            country=self.country,
        )


class OrderCreate(BaseModel):
    """
    Zlozenie zamowienia z koszyka.
    Albo istniejacy adres (shipping_address_id), albo nowy (shipping), nie oba.
    """

    shipping_address_id: Optional[int] = Field(None, gt=0)
    shipping: Optional[ShippingInfoIn] = None
    payment_method_type: PaymentMethodType = PaymentMethodType.CARD

    @model_validator(mode="after")
    def one_address_source(self):
        if (self.shipping_address_id is None) == (self.shipping is None):
            raise ValueError("Provide either shipping_address_id or shipping, not both")
        return self


class OrderProductOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal
    product: OrderProductOut

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    total: Decimal
    payment_intent_id: Optional[str] = None
    shipping_address: AddressOut
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# =====================================================
# PAYMENTS
# =====================================================
class PaymentIntentIn(BaseModel):
    order_id: int = Field(..., gt=0)
    payment_method_type: PaymentMethodType = PaymentMethodType.CARD
    # email z checkoutu; bez niego paragon idzie na email konta
    receipt_email: Optional[str] = None

    @field_validator("receipt_email")
    @classmethod
    def valid_receipt_email(cls, v: Optional[str]):
        if v is None:
            return v
        v = _required(v, "Email")
        if not EMAIL_RE.fullmatch(v):
            raise ValueError("Email is invalid")
        return v


class PaymentIntentOut(BaseModel):
    client_secret: str
    payment_intent_id: str


class WebhookAck(BaseModel):
    received: bool = True


# =====================================================
# CATALOG
# =====================================================
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = ""


class CategoryOut(BaseModel):
    id: int
    name: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=240)
    description: str = ""
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    images: List[str] = []
    highlighted: bool = False
    category_id: Optional[int] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=240)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    images: Optional[List[str]] = None
    highlighted: Optional[bool] = None
    category_id: Optional[int] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    stock: int
    images: List[str]
    highlighted: bool
    category: Optional[CategoryOut] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class ProductListOut(BaseModel):
    products: List[ProductOut]
    pagination: PaginationOut


# =====================================================
# BANNERS
# =====================================================
class BannerCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=240)
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    link_url: Optional[str] = None
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    position: BannerPosition
    priority: int = 0
    target_audience: TargetAudience = TargetAudience.ALL
    discount: Optional[Decimal] = Field(None, ge=0, le=100)
    promo_code: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime):
        return as_utc(v)

    @model_validator(mode="after")
    def window_is_ordered(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BannerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=240)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1)
    link_url: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    position: Optional[BannerPosition] = None
    priority: Optional[int] = None
    target_audience: Optional[TargetAudience] = None
    discount: Optional[Decimal] = Field(None, ge=0, le=100)
    promo_code: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]):
        return as_utc(v)


class BannerOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    start_date: datetime
    end_date: datetime
    is_active: bool
    position: BannerPosition
    priority: int
    target_audience: TargetAudience
    discount: Optional[Decimal] = None
    promo_code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# USERS
# =====================================================
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., max_length=255)
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str):
        v = _required(v, "Email")
        if not EMAIL_RE.fullmatch(v):
            raise ValueError("Email is invalid")
        return v.lower()


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    role: Optional[UserRole] = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
