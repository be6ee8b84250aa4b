# storefront/services/order_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import ORDER_TRANSITIONS, OrderStatus
from storefront.domain.errors import (
    ConcurrencyConflictError,
    EmptyCartError,
    InsufficientStockError,
    InvalidAddressError,
    InvalidStatusTransitionError,
    NotFoundError,
    OwnershipError,
)
from storefront.domain.schemas import OrderCreate
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Konwersja koszyka na zamowienie dzieje sie w jednej transakcji:
    zamowienie + pozycje, warunkowe zmniejszenie stanu, wyczyszczenie koszyka.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.addresses = AddressRepo(db)
        self.notification_service = notification_service or NotificationService()

    def place_order(self, user_id: int, shipping_address_id: int) -> OrderModel:
        """
        Use Case: Tworzenie zamowienia z koszyka.

        1. Koszyk istnieje i nie jest pusty
        2. Adres nalezy do uzytkownika
        3. Snapshot cen, total = suma(cena * ilosc) z tych samych cen
        4. Zamowienie + pozycje
        5. Stan produktow zmniejszany warunkowo (stock >= ilosc)
        6. Koszyk czyszczony
        Wszystko albo nic: jeden commit na koncu.
        """
        try:
            address = self.addresses.get_address(shipping_address_id)
            order = self._convert_cart(user_id, address)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        return self._after_placed(order)

    def place_order_from_checkout(self, user_id: int, checkout: OrderCreate) -> OrderModel:
        """Checkout z formularza: istniejacy adres albo nowy, zapisany w tej samej transakcji."""
        if checkout.shipping_address_id is not None:
            return self.place_order(user_id, checkout.shipping_address_id)

        try:
            data = checkout.shipping.to_address()
            address = self.addresses.add_address(
                AddressModel(
                    user_id=user_id,
                    street=data.street,
                    city=data.city,
                    state=data.state,
                    postal_code=data.postal_code,
                    country=data.country,
                    is_default=False,
                )
            )
            order = self._convert_cart(user_id, address)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        return self._after_placed(order)

    def get_order(self, user_id: int, order_id: int) -> OrderModel:
        """
        Use Case: Pobranie zamowienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user_id:
            raise OwnershipError("Order does not belong to the current user")

        return order

    def list_orders(self, user_id: int) -> list[OrderModel]:
        return self.repo.list_orders_for_user(user_id)

    # =====================================================
    # PLATNOSCI
    # =====================================================
    def mark_paid(self, order_id: int) -> OrderModel:
        order = self._require_order(order_id)

        if order.status == OrderStatus.PROCESSING.value:
            logger.info(f"Order {order_id} juz w PROCESSING, pomijam")
            return order

        return self._transition(order, OrderStatus.PROCESSING)

    def mark_payment_failed(self, order_id: int) -> OrderModel:
        order = self._require_order(order_id)

        if order.status == OrderStatus.CANCELED.value:
            logger.info(f"Order {order_id} juz anulowany, pomijam")
            return order

        return self._transition(order, OrderStatus.CANCELED)

    # =====================================================
    # ADMIN
    # =====================================================
    def list_all_orders(
        self,
        status: OrderStatus | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> list[OrderModel]:
        return self.repo.list_orders(
            status=status.value if status else None,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def get_any_order(self, order_id: int) -> OrderModel:
        return self._require_order(order_id)

    def update_status(self, order_id: int, status: OrderStatus) -> OrderModel:
        order = self._require_order(order_id)
        return self._transition(order, status)

    # =====================================================
    # helpers
    # =====================================================
    def _convert_cart(self, user_id: int, address: AddressModel | None) -> OrderModel:
        cart = self.carts.get_cart_by_user(user_id)
        items = self.carts.get_cart_items(cart.id) if cart else []

        if not items:
            raise EmptyCartError()

        if not address or address.user_id != user_id:
            raise InvalidAddressError()

        # snapshot cen, total liczony z tych samych wartosci co OrderItem.price
        lines = [(i.product_id, i.quantity, i.product.price) for i in items]
        total = sum((price * qty for _, qty, price in lines), Decimal("0.00"))

        order = self.repo.create_order(
            OrderModel(
                user_id=user_id,
                shipping_address_id=address.id,
                status=OrderStatus.PENDING.value,
                total=total,
                items=[
                    OrderItemModel(product_id=pid, quantity=qty, price=price)
                    for pid, qty, price in lines
                ],
            )
        )

        for product_id, quantity, _ in lines:
            if self.products.decrement_stock(product_id, quantity) == 0:
                logger.warning(f"Za malo produktu {product_id} na stanie, wycofuje zamowienie")
                raise InsufficientStockError(product_id)

        self.carts.clear_items(cart.id)
        if self.carts.update_cart_version(cart.id, cart.version) == 0:
            raise ConcurrencyConflictError()

        return order

    def _after_placed(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        logger.info(f"Order {order.id} created for user {order.user_id}, total {order.total}")

        # powiadomienie asynchronicznie
        self.notify(order, "placed")
        return order

    def notify(self, order: OrderModel, event: str) -> None:
        """Kolejkuje powiadomienie; zamowienie jest juz zapisane, wiec blad brokera tylko logujemy."""
        try:
            self.notification_service.send_order_notification(order.user_id, order.id, event)
        except Exception as e:
            logger.error(f"Nie udalo sie wyslac powiadomienia '{event}' dla order {order.id}: {e}")

    def _require_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def _transition(self, order: OrderModel, status: OrderStatus) -> OrderModel:
        current = OrderStatus(order.status)

        if status not in ORDER_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(
                f"Cannot change order status from {current.value} to {status.value}"
            )

        try:
            order.status = status.value
            if status == OrderStatus.CANCELED:
                # anulowane zamowienie zwraca towar na stan
                for item in order.items:
                    self.products.increment_stock(item.product_id, item.quantity)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        self.db.refresh(order)
        logger.info(f"Order {order.id}: {current.value} -> {status.value}")
        return order
