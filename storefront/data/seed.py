# storefront/data/seed.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.database import SessionLocal
from storefront.data.models import AddressModel, BannerModel, CategoryModel, ProductModel, UserModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    ("Electronics", "Electronic devices and gadgets"),
    ("Clothing", "Apparel and fashion items"),
    ("Home & Kitchen", "Household items and kitchen appliances"),
    ("Books", "Books, ebooks, and audiobooks"),
    ("Sports & Outdoors", "Sports equipment and outdoor gear"),
]

PRODUCTS_PER_CATEGORY = 5
HIGHLIGHTED_PER_CATEGORY = 3


def _products(category: CategoryModel) -> list[ProductModel]:
    products = []
    for i in range(PRODUCTS_PER_CATEGORY):
        products.append(
            ProductModel(
                name=f"{category.name} item {i + 1}",
                description=f"Sample product {i + 1} from {category.name.lower()}",
                price=Decimal(10 + 15 * i) + Decimal("0.99"),
                stock=10 * (i + 1),
                images=[f"https://picsum.photos/seed/{category.id}-{i}/640/480"],
                highlighted=i < HIGHLIGHTED_PER_CATEGORY,
                category_id=category.id,
            )
        )
    return products


def seed(db: Session | None = None) -> bool:
    """Dane startowe; tylko gdy baza jest pusta. Zwraca True gdy cos dodano."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.execute(select(CategoryModel.id).limit(1)).first():
            return False

        categories = [CategoryModel(name=name, description=desc) for name, desc in CATEGORIES]
        db.add_all(categories)
        db.flush()

        for category in categories:
            db.add_all(_products(category))

        admin = UserModel(name="Admin User", email="admin@storefront.local", role="ADMIN")
        customer = UserModel(name="Jan Kowalski", email="jan@storefront.local", role="USER")
        db.add_all([admin, customer])
        db.flush()

        db.add(
            AddressModel(
                user_id=customer.id,
                street="ul. Marszalkowska 1",
                city="Warszawa",
                state="Mazowieckie",
                postal_code="00-001",
                country="Poland",
                is_default=True,
            )
        )

        now = datetime.now(timezone.utc)
        db.add_all(
            [
                BannerModel(
                    title="Welcome to the shop",
                    description="10% off your first order",
                    image_url="https://picsum.photos/seed/welcome/1200/300",
                    link_url="/shop",
                    start_date=now - timedelta(days=1),
                    end_date=now + timedelta(days=30),
                    position="HOME_TOP",
                    priority=10,
                    target_audience="NEW_USERS",
                    discount=Decimal("10.00"),
                    promo_code="WELCOME10",
                ),
                BannerModel(
                    title="Good to see you again",
                    image_url="https://picsum.photos/seed/back/1200/300",
                    link_url="/shop",
                    start_date=now - timedelta(days=1),
                    end_date=now + timedelta(days=30),
                    position="HOME_TOP",
                    priority=5,
                    target_audience="RETURNING_USERS",
                ),
                BannerModel(
                    title="Free shipping over $50",
                    image_url="https://picsum.photos/seed/shipping/1200/300",
                    start_date=now - timedelta(days=1),
                    end_date=now + timedelta(days=90),
                    position="CART_PAGE",
                    priority=0,
                    target_audience="ALL",
                ),
            ]
        )

        db.commit()
        logger.info(f"Seed: {len(categories)} kategorii, {len(categories) * PRODUCTS_PER_CATEGORY} produktow")
        return True
    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    seed()
