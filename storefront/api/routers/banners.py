# storefront/api/routers/banners.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_optional_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.enums import BannerPosition
from storefront.domain.schemas import BannerOut
from storefront.services.banner_service import BannerService

router = APIRouter(prefix="/banners", tags=["banners"])


@router.get("", response_model=List[BannerOut])
def list_banners(
    position: Optional[BannerPosition] = None,
    active: bool = False,
    db: Session = Depends(get_db),
):
    return BannerService(db).list_banners(position=position, active_only=active)


@router.get("/select", response_model=List[BannerOut])
def select_banners(
    position: BannerPosition,
    max_banners: int = Query(1, ge=1, le=20, alias="max"),
    user: UserModel | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Banery do wyswietlenia na danej pozycji strony.
    Zalogowany widzi ALL + RETURNING_USERS, anonim ALL + NEW_USERS.
    """
    return BannerService(db).select_banners(
        position=position,
        authenticated=user is not None,
        max_banners=max_banners,
    )


@router.get("/{banner_id}", response_model=BannerOut)
def get_banner(banner_id: int, db: Session = Depends(get_db)):
    return BannerService(db).get_banner(banner_id)
