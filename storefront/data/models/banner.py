# storefront/data/models/banner.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric

from storefront.data.database import Base


class BannerModel(Base):
    __tablename__ = "promotional_banners"

    id = Column(Integer, primary_key=True)
    title = Column(String(240), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=False)
    link_url = Column(String(1024), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    position = Column(String(32), nullable=False, index=True)
    priority = Column(Integer, nullable=False, default=0)
    target_audience = Column(String(32), nullable=False, default="ALL")

    discount = Column(Numeric(5, 2), nullable=True)
    promo_code = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
