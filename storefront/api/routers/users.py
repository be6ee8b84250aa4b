# storefront/api/routers/users.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_current_user
from storefront.data.models.user import UserModel
from storefront.domain.schemas import UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def get_me(user: UserModel = Depends(get_current_user)):
    return user
