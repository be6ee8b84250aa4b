# storefront/services/user_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import InvalidRequestError, NotFoundError
from storefront.domain.schemas import UserCreate, UserUpdate
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserModel:
        if self.repo.get_user_by_email(payload.email):
            raise InvalidRequestError("User with this email already exists")

        try:
            user = self.repo.create_user(
                UserModel(name=payload.name.strip(), email=payload.email, role=payload.role.value)
            )
        except IntegrityError:
            self.db.rollback()
            raise InvalidRequestError("User with this email already exists")

        logger.info(f"Utworzono uzytkownika {user.id} ({user.role})")
        return user

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> list[UserModel]:
        return self.repo.list_users()

    def update_user(self, user_id: int, payload: UserUpdate) -> UserModel:
        user = self.get_user(user_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            user.name = changes["name"].strip()
        if "role" in changes:
            user.role = changes["role"].value

        user = self.repo.save(user)
        logger.info(f"Zaktualizowano uzytkownika {user.id}: {sorted(changes)}")
        return user
