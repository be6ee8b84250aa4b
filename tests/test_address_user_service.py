import pytest

from storefront.domain.enums import UserRole
from storefront.domain.errors import InvalidRequestError, NotFoundError
from storefront.domain.schemas import AddressIn, UserCreate, UserUpdate
from storefront.services.address_service import AddressService
from storefront.services.user_service import UserService


def _address(**overrides):
    data = {
        "street": "Long Rd 5",
        "city": "Gotham",
        "state": "NJ",
        "postal_code": "07001",
        "country": "USA",
    }
    data.update(overrides)
    return AddressIn(**data)


class TestAddressService:
    def test_create_and_list(self, db, user):
        svc = AddressService(db)

        created = svc.create_address(user.id, _address())

        assert [a.id for a in svc.list_addresses(user.id)] == [created.id]
        assert created.is_default is False

    def test_new_default_clears_previous(self, db, user):
        svc = AddressService(db)
        first = svc.create_address(user.id, _address(is_default=True))
        second = svc.create_address(user.id, _address(street="Short Rd 1", is_default=True))

        db.expire_all()
        defaults = [a.id for a in svc.list_addresses(user.id) if a.is_default]

        assert defaults == [second.id]
        assert first.is_default is False

    def test_default_is_per_user(self, db, user, other_user):
        svc = AddressService(db)
        theirs = svc.create_address(other_user.id, _address(is_default=True))
        svc.create_address(user.id, _address(is_default=True))

        db.refresh(theirs)
        assert theirs.is_default is True

    def test_list_only_own(self, db, user, other_user):
        svc = AddressService(db)
        svc.create_address(other_user.id, _address())

        assert svc.list_addresses(user.id) == []

    @pytest.mark.parametrize("field", ["street", "city", "state", "postal_code", "country"])
    def test_blank_field_is_rejected(self, field):
        with pytest.raises(ValueError):
            _address(**{field: "   "})


class TestUserService:
    def test_create_normalises_email(self, db):
        user = UserService(db).create_user(UserCreate(name="Ann", email="Ann@Example.COM"))

        assert user.email == "ann@example.com"
        assert user.role == UserRole.USER.value

    def test_duplicate_email(self, db):
        svc = UserService(db)
        svc.create_user(UserCreate(name="Ann", email="ann@example.com"))

        with pytest.raises(InvalidRequestError):
            svc.create_user(UserCreate(name="Other Ann", email="ANN@example.com"))

    def test_update_role(self, db, user):
        updated = UserService(db).update_user(user.id, UserUpdate(role=UserRole.ADMIN))

        assert updated.role == "ADMIN"
        assert updated.name == user.name

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            UserService(db).get_user(404)

    def test_list_users(self, db, user, admin):
        assert [u.id for u in UserService(db).list_users()] == [user.id, admin.id]
