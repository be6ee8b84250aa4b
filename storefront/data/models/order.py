# storefront/data/models/order.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    shipping_address_id = Column(Integer, ForeignKey("addresses.id"), nullable=False)

    status = Column(String(16), nullable=False, default="PENDING")  # PENDING, PROCESSING, SHIPPED, DELIVERED, CANCELED
    total = Column(Numeric(10, 2), nullable=False)
    payment_intent_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    shipping_address = relationship("AddressModel")
    user = relationship("UserModel")
