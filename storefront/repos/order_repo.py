# storefront/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel

SORT_COLUMNS = {
    "created_at": OrderModel.created_at,
    "total": OrderModel.total,
    "id": OrderModel.id,
}


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders_for_user(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .options(selectinload(OrderModel.items), selectinload(OrderModel.shipping_address))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def list_orders(
        self,
        status: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> list[OrderModel]:
        column = SORT_COLUMNS.get(sort_by, OrderModel.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        stmt = select(OrderModel).options(
            selectinload(OrderModel.items), selectinload(OrderModel.shipping_address)
        )
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return list(self.db.execute(stmt.order_by(ordering, OrderModel.id.desc())).scalars().all())

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
