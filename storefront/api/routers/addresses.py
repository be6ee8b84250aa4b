# storefront/api/routers/addresses.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import AddressIn, AddressOut
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.get("", response_model=List[AddressOut])
def list_addresses(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AddressService(db).list_addresses(user.id)


@router.post("", response_model=AddressOut, status_code=201)
def create_address(
    payload: AddressIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AddressService(db).create_address(user.id, payload)
