import os

# settings are read at import time
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["PAYMENT_GATEWAY"] = "fake"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.api.deps import get_event_store, get_payment_gateway
from storefront.data.database import Base, get_db
from storefront.data.models import (
    AddressModel,
    BannerModel,
    CategoryModel,
    ProductModel,
    UserModel,
)
from storefront.payments import reset_gateway, set_gateway
from storefront.payments.fake_adapter import FakeGateway
from storefront.utils.logging import configure_logging
from storefront.utils.security import create_access_token

configure_logging()


class InMemoryEventStore:
    """Same contract as WebhookEventStore, without Redis."""

    def __init__(self):
        self.events: dict[str, str] = {}

    def claim(self, event_id: str) -> bool:
        if event_id in self.events:
            return False
        self.events[event_id] = "processing"
        return True

    def mark_done(self, event_id: str) -> None:
        if event_id in self.events:
            self.events[event_id] = "done"

    def release(self, event_id: str) -> bool:
        if self.events.get(event_id) == "processing":
            del self.events[event_id]
            return True
        return False


class RecordingNotifier:
    def __init__(self):
        self.sent: list[tuple[int, int, str]] = []

    def send_order_notification(self, user_id: int, order_id: int, event: str):
        self.sent.append((user_id, order_id, event))


class BrokenNotifier:
    """Notifier whose broker is down."""

    def send_order_notification(self, user_id: int, order_id: int, event: str):
        raise ConnectionError("broker unavailable")


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def gateway():
    gateway = FakeGateway()
    set_gateway(gateway)
    yield gateway
    reset_gateway()


@pytest.fixture()
def event_store():
    return InMemoryEventStore()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def app(db, gateway, event_store):
    app = create_app()

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_event_store] = lambda: event_store
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


# =====================================================
# factories
# =====================================================
@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(role: str = "USER", name: str | None = None) -> UserModel:
        counter["n"] += 1
        user = UserModel(
            name=name or f"User {counter['n']}",
            email=f"user{counter['n']}@example.com",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def other_user(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(role="ADMIN", name="Admin")


@pytest.fixture()
def make_category(db):
    def _make(name: str = "Electronics") -> CategoryModel:
        category = CategoryModel(name=name, description=f"{name} category")
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture()
def make_product(db):
    def _make(
        name: str = "Product",
        price: str = "10.00",
        stock: int = 10,
        category: CategoryModel | None = None,
        description: str = "",
    ) -> ProductModel:
        product = ProductModel(
            name=name,
            description=description or f"{name} description",
            price=Decimal(price),
            stock=stock,
            images=[f"https://img.example.com/{name.lower().replace(' ', '-')}.jpg"],
            category_id=category.id if category else None,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture()
def make_address(db):
    def _make(user: UserModel, is_default: bool = False) -> AddressModel:
        address = AddressModel(
            user_id=user.id,
            street="Main St 1",
            city="Springfield",
            state="IL",
            postal_code="62701",
            country="USA",
            is_default=is_default,
        )
        db.add(address)
        db.commit()
        db.refresh(address)
        return address

    return _make


@pytest.fixture()
def make_banner(db):
    def _make(
        position: str = "HOME_TOP",
        priority: int = 0,
        audience: str = "ALL",
        is_active: bool = True,
        starts_in: timedelta = timedelta(days=-1),
        ends_in: timedelta = timedelta(days=1),
        title: str | None = None,
    ) -> BannerModel:
        now = datetime.now(timezone.utc)
        banner = BannerModel(
            title=title or f"{position} p{priority} {audience}",
            image_url="https://img.example.com/banner.jpg",
            start_date=now + starts_in,
            end_date=now + ends_in,
            is_active=is_active,
            position=position,
            priority=priority,
            target_audience=audience,
        )
        db.add(banner)
        db.commit()
        db.refresh(banner)
        return banner

    return _make


def auth_headers(user: UserModel) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture()
def user_headers(user):
    return auth_headers(user)


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture()
def headers_for():
    return auth_headers


@pytest.fixture()
def broken_notifier():
    return BrokenNotifier()
