# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import (
    ConcurrencyConflictError,
    InsufficientStockError,
    InvalidRequestError,
    NotFoundError,
    OwnershipError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def serialize_cart(cart: CartModel, items: list[CartItemModel]) -> Dict[str, Any]:
    """Subtotal i total_items nie sa zapisywane, zawsze liczone z aktualnych cen."""
    subtotal = sum((i.quantity * i.product.price for i in items), Decimal("0.00"))

    return {
        "id": cart.id,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "quantity": i.quantity,
                "product": {
                    "id": i.product.id,
                    "name": i.product.name,
                    "description": i.product.description,
                    "price": i.product.price,
                    "images": list(i.product.images or []),
                    "stock": i.product.stock,
                },
            }
            for i in items
        ],
        "subtotal": subtotal.quantize(CENTS),
        "total_items": sum(i.quantity for i in items),
    }


class CartService:
    """
    Use case'y koszyka, jeden koszyk na uzytkownika.
    commands (add, update, remove, clear) modyfikuja stan i podbijaja version,
    query (get) tylko odczyt + leniwe utworzenie koszyka.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create_cart(user_id)
        return serialize_cart(cart, self.repo.get_cart_items(cart.id))

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidRequestError("Quantity must be a positive number")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        if product.stock < quantity:
            raise InsufficientStockError(product_id)

        cart = self._get_or_create_cart(user_id)

        try:
            existing_item = self.repo.get_cart_item(cart.id, product_id)

            if existing_item:
                new_quantity = existing_item.quantity + quantity
                # suma tez nie moze przekroczyc stanu
                if new_quantity > product.stock:
                    raise InsufficientStockError(product_id)

                logger.info(
                    f"Produkt {product_id} juz jest w koszyku {cart.id}, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {new_quantity}"
                )
                existing_item.quantity = new_quantity
                self.repo.add_cart_item(existing_item)
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                    )
                )

            self._bump_version(cart)
            self.repo.commit()

        except IntegrityError:
            # rownolegle dodanie tego samego produktu (u_cart_product)
            self.repo.rollback()
            raise ConcurrencyConflictError()
        except Exception:
            self.repo.rollback()
            raise

        return self.get_cart(user_id)

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidRequestError("Quantity must be a positive number")

        cart, item = self._owned_item(user_id, item_id)

        if quantity > item.product.stock:
            raise InsufficientStockError(item.product_id)

        try:
            item.quantity = quantity
            self.repo.add_cart_item(item)
            self._bump_version(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Zmieniono ilosc pozycji {item_id} w koszyku {cart.id} na {quantity}")
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        cart, item = self._owned_item(user_id, item_id)

        try:
            self.repo.delete_cart_item(item)
            self._bump_version(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Usunieto pozycje {item_id} z koszyka {cart.id}")
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create_cart(user_id)

        try:
            removed = self.repo.clear_items(cart.id)
            self._bump_version(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Wyczyszczono koszyk {cart.id}, usunieto {removed} pozycji")
        return self.get_cart(user_id)

    # =====================================================
    # helpers
    # =====================================================
    def _get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.repo.create_cart(CartModel(user_id=user_id, version=1))
            self.repo.commit()
        except IntegrityError:
            # inny request utworzyl koszyk pierwszy
            self.repo.rollback()
            created = self.repo.get_cart_by_user(user_id)
            if created is None:
                raise

        logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
        return created

    def _owned_item(self, user_id: int, item_id: int) -> tuple[CartModel, CartItemModel]:
        item = self.repo.get_item(item_id)
        if not item:
            raise NotFoundError("Cart item not found")

        cart = self.repo.get_cart_by_user(user_id)
        if not cart or item.cart_id != cart.id:
            raise OwnershipError("Cart item does not belong to the current user")

        return cart, item

    def _bump_version(self, cart: CartModel) -> None:
        # Optimistic locking, np. UPDATE carts SET version 2 WHERE id 1 AND version 1
        rowcount = self.repo.update_cart_version(cart_id=cart.id, old_version=cart.version)
        if rowcount == 0:
            raise ConcurrencyConflictError()
