# storefront/services/banner_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.banner import BannerModel
from storefront.domain.enums import BannerPosition, TargetAudience
from storefront.domain.errors import InvalidRequestError, NotFoundError
from storefront.domain.schemas import BannerCreate, BannerUpdate, as_utc
from storefront.repos.banner_repo import BannerRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def audiences_for(authenticated: bool) -> set[str]:
    if authenticated:
        return {TargetAudience.ALL.value, TargetAudience.RETURNING_USERS.value}
    return {TargetAudience.ALL.value, TargetAudience.NEW_USERS.value}


class BannerService:
    """
    Banery promocyjne: wybor do wyswietlenia + CRUD dla admina.
    """

    def __init__(self, db: Session):
        self.repo = BannerRepo(db)

    def select_banners(
        self,
        position: BannerPosition,
        authenticated: bool,
        max_banners: int = 1,
        now: datetime | None = None,
    ) -> list[BannerModel]:
        """
        Aktywne banery dla pozycji: is_active i start_date <= now <= end_date,
        odbiorcy wg zalogowania, najwyzszy priorytet pierwszy, max max_banners.
        """
        if max_banners < 1:
            return []

        now = as_utc(now or datetime.now(timezone.utc))
        allowed = audiences_for(authenticated)

        active = self.repo.list_banners(position=position.value, active_at=now)
        selected = [b for b in active if b.target_audience in allowed][:max_banners]

        logger.debug(f"Banery dla {position.value}: {[b.id for b in selected]}")
        return selected

    def list_banners(
        self,
        position: BannerPosition | None = None,
        active_only: bool = False,
    ) -> list[BannerModel]:
        return self.repo.list_banners(
            position=position.value if position else None,
            active_at=datetime.now(timezone.utc) if active_only else None,
        )

    def get_banner(self, banner_id: int) -> BannerModel:
        banner = self.repo.get_banner(banner_id)
        if not banner:
            raise NotFoundError("Banner not found")
        return banner

    def create_banner(self, payload: BannerCreate) -> BannerModel:
        data = payload.model_dump()
        data["position"] = payload.position.value
        data["target_audience"] = payload.target_audience.value

        banner = self.repo.add_banner(BannerModel(**data))
        logger.info(f"Utworzono baner {banner.id} ({banner.position})")
        return banner

    def update_banner(self, banner_id: int, payload: BannerUpdate) -> BannerModel:
        banner = self.get_banner(banner_id)
        changes = payload.model_dump(exclude_unset=True)

        for field in ("title", "image_url", "start_date", "end_date", "position", "is_active", "priority", "target_audience"):
            if field in changes and changes[field] is None:
                raise InvalidRequestError(f"{field} cannot be empty")

        for field in ("position", "target_audience"):
            if field in changes:
                changes[field] = changes[field].value

        start = changes.get("start_date", as_utc(banner.start_date))
        end = changes.get("end_date", as_utc(banner.end_date))
        if end < start:
            raise InvalidRequestError("end_date must not be before start_date")

        for field, value in changes.items():
            setattr(banner, field, value)

        banner = self.repo.save(banner)
        logger.info(f"Zaktualizowano baner {banner.id}: {sorted(changes)}")
        return banner

    def delete_banner(self, banner_id: int) -> None:
        banner = self.get_banner(banner_id)
        self.repo.delete_banner(banner)
        logger.info(f"Usunieto baner {banner_id}")
