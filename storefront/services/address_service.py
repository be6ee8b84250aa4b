# storefront/services/address_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.schemas import AddressIn
from storefront.repos.address_repo import AddressRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AddressRepo(db)

    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.list_for_user(user_id)

    def create_address(self, user_id: int, payload: AddressIn) -> AddressModel:
        """Nowy adres; is_default zdejmuje flage z pozostalych adresow uzytkownika."""
        try:
            if payload.is_default:
                self.repo.clear_default(user_id)

            address = self.repo.add_address(AddressModel(user_id=user_id, **payload.model_dump()))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(address)
        logger.info(f"Dodano adres {address.id} dla uzytkownika {user_id}")
        return address
