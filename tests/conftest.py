import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_SECRET_KEY"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "0"

import pytest
from decimal import Decimal
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from prelovin.auth.service import create_access_token
from prelovin.categories.models import Category
from prelovin.core.rate_limiter import limiter
from prelovin.database.core import Base, build_engine, get_db
from prelovin.products.models import Product, ProductCondition
from prelovin.users.models import User
from main import app


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite shared by every connection of one test."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """
    Creates a new, isolated in-memory database session for each test.
    """
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def seller(db_session):
    user = User(id="seller-1", email="seller@example.com", first_name="Sari", last_name="Seller", city="Jakarta")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def buyer(db_session):
    user = User(id="buyer-1", email="buyer@example.com", first_name="Budi", last_name="Buyer",
                phone="08123456789", address="Jl. Merdeka 1", city="Bandung")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def category(db_session):
    cat = Category(name="Elektronik", slug="elektronik", icon="Smartphone")
    db_session.add(cat)
    db_session.commit()
    db_session.refresh(cat)
    return cat


@pytest.fixture(scope="function")
def make_product(db_session):
    """Factory for listings; defaults to one unit at 100000."""

    def _make(seller_id, **overrides):
        data = {
            "name": "Kamera Bekas",
            "description": "Masih mulus",
            "price": Decimal("100000"),
            "condition": ProductCondition.BAGUS,
            "images": [],
            "stock": 1,
            "is_active": True,
            "views": 0,
            "sold_count": 0,
        }
        data.update(overrides)
        product = Product(seller_id=seller_id, **data)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture(scope="function")
def client(db_session):
    """
    Creates a TestClient for the app, overriding the database dependency.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def headers_for(user_id, **claims):
    token = create_access_token(user_id, **claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def seller_headers(seller):
    return headers_for(seller.id)


@pytest.fixture(scope="function")
def buyer_headers(buyer):
    return headers_for(buyer.id)


@pytest.fixture(scope="function")
def auth_headers():
    """Returns a function building bearer headers for any user id."""
    return headers_for
