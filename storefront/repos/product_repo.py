# storefront/repos/product_repo.py
from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.category import CategoryModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.product import ProductModel

SORTS = {
    "newest": (ProductModel.created_at.desc(), ProductModel.id.desc()),
    "price_asc": (ProductModel.price.asc(), ProductModel.id.asc()),
    "price_desc": (ProductModel.price.desc(), ProductModel.id.asc()),
    "name_asc": (ProductModel.name.asc(), ProductModel.id.asc()),
    "name_desc": (ProductModel.name.desc(), ProductModel.id.asc()),
}


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 10,
        sort: str = "newest",
    ) -> tuple[list[ProductModel], int]:
        stmt = select(ProductModel)
        if category:
            stmt = stmt.join(CategoryModel).where(CategoryModel.name == category)
        if search:
            like = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).like(like),
                    func.lower(ProductModel.description).like(like),
                )
            )

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        rows = self.db.execute(
            stmt.options(joinedload(ProductModel.category))
            .order_by(*SORTS.get(sort, SORTS["newest"]))
            .offset(offset)
            .limit(limit)
        ).scalars().unique().all()
        return list(rows), total

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.flush()

    def has_order_history(self, product_id: int) -> bool:
        return self.db.execute(
            select(OrderItemModel.id).where(OrderItemModel.product_id == product_id).limit(1)
        ).first() is not None

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        # warunkowy update, 0 wierszy = za malo na stanie
        res = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        res = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    # kategorie
    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars().all())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category
