# storefront/domain/enums.py
from enum import Enum


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


# dozwolone przejscia statusu zamowienia
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELED: set(),
}


class BannerPosition(str, Enum):
    HOME_TOP = "HOME_TOP"
    HOME_BOTTOM = "HOME_BOTTOM"
    SHOP_PAGE = "SHOP_PAGE"
    PRODUCT_PAGE = "PRODUCT_PAGE"
    CART_PAGE = "CART_PAGE"
    CHECKOUT_PAGE = "CHECKOUT_PAGE"


class TargetAudience(str, Enum):
    ALL = "ALL"
    NEW_USERS = "NEW_USERS"
    RETURNING_USERS = "RETURNING_USERS"


class PaymentMethodType(str, Enum):
    CARD = "card"
