# storefront/repos/banner_repo.py
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.banner import BannerModel


class BannerRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_banner(self, banner_id: int) -> BannerModel | None:
        return self.db.get(BannerModel, banner_id)

    def list_banners(
        self,
        position: str | None = None,
        active_at: datetime | None = None,
    ) -> list[BannerModel]:
        stmt = select(BannerModel)
        if position:
            stmt = stmt.where(BannerModel.position == position)
        if active_at is not None:
            stmt = stmt.where(
                BannerModel.is_active.is_(True),
                BannerModel.start_date <= active_at,
                BannerModel.end_date >= active_at,
            )
        # wyzszy priorytet najpierw
        return list(
            self.db.execute(stmt.order_by(BannerModel.priority.desc(), BannerModel.id.asc())).scalars().all()
        )

    def add_banner(self, banner: BannerModel) -> BannerModel:
        self.db.add(banner)
        self.db.commit()
        self.db.refresh(banner)
        return banner

    def save(self, banner: BannerModel) -> BannerModel:
        self.db.commit()
        self.db.refresh(banner)
        return banner

    def delete_banner(self, banner: BannerModel) -> None:
        self.db.delete(banner)
        self.db.commit()
