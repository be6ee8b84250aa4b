# storefront/services/catalog_service.py
import math
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import InvalidRequestError, NotFoundError
from storefront.domain.schemas import CategoryCreate, ProductCreate, ProductUpdate
from storefront.repos.product_repo import SORTS, ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


class CatalogService:
    """
    Katalog produktow i kategorii.
    Odczyt dla sklepu, zapis tylko z panelu admina.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
        sort: str = "newest",
    ) -> Dict[str, Any]:
        if page < 1:
            raise InvalidRequestError("Page must be a positive number")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidRequestError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if sort not in SORTS:
            raise InvalidRequestError(f"Unknown sort '{sort}'")

        search = search.strip() if search else None
        products, total = self.repo.list_products(
            category=category,
            search=search,
            offset=(page - 1) * limit,
            limit=limit,
            sort=sort,
        )

        return {
            "products": products,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit),
            },
        }

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_categories(self) -> list[CategoryModel]:
        return self.repo.list_categories()

    # =====================================================
    # ADMIN
    # =====================================================
    def create_category(self, payload: CategoryCreate) -> CategoryModel:
        name = payload.name.strip()
        if self.repo.get_category_by_name(name):
            raise InvalidRequestError("Category already exists")

        try:
            category = self.repo.add_category(CategoryModel(name=name, description=payload.description))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise InvalidRequestError("Category already exists")
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(category)
        logger.info(f"Utworzono kategorie {category.id} '{category.name}'")
        return category

    def create_product(self, payload: ProductCreate) -> ProductModel:
        if payload.category_id is not None:
            self._require_category(payload.category_id)

        try:
            product = self.repo.add_product(ProductModel(**payload.model_dump()))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(product)
        logger.info(f"Utworzono produkt {product.id} '{product.name}'")
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        changes = payload.model_dump(exclude_unset=True)

        for field in ("name", "price", "stock", "images", "highlighted", "description"):
            if field in changes and changes[field] is None:
                raise InvalidRequestError(f"{field} cannot be empty")

        if changes.get("category_id") is not None:
            self._require_category(changes["category_id"])

        try:
            for field, value in changes.items():
                setattr(product, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(product)
        logger.info(f"Zaktualizowano produkt {product.id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)

        # pozycje zamowien trzymaja snapshot, produktu z historia nie usuwamy
        if self.repo.has_order_history(product_id):
            raise InvalidRequestError("Product has orders and cannot be deleted")

        try:
            self.repo.delete_product(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Usunieto produkt {product_id}")

    def _require_category(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category
