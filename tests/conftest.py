import os

# Point the app at a throwaway database before config is first imported
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.users import User
from models.product import Product
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, name, email, password="secret123", is_admin=False):
    user = User(name=name, email=email, password_hash=get_password_hash(password), is_admin=is_admin)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(data={"sub": str(user.id), "is_admin": user.is_admin})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "Admin User", "admin@example.com", is_admin=True)


@pytest.fixture
def shopper(db):
    return make_user(db, "John Doe", "john@example.com")


@pytest.fixture
def other_shopper(db):
    return make_user(db, "Jane Doe", "jane@example.com")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def shopper_headers(shopper):
    return auth_headers(shopper)


@pytest.fixture
def products(db):
    items = [
        Product(name="Wireless Mouse", image="/images/mouse.jpg", brand="Logitech",
                category="Electronics", price=Decimal("10.00"), count_in_stock=5),
        Product(name="Gaming Headset", image="/images/headset.jpg", brand="Sony",
                category="Electronics", price=Decimal("60.00"), count_in_stock=3),
        Product(name="Coffee Mug", image="/images/mug.jpg", brand="Acme",
                category="Kitchen", price=Decimal("4.50"), count_in_stock=0),
    ]
    db.add_all(items)
    db.commit()
    for p in items:
        db.refresh(p)
    return items


@pytest.fixture
def other_headers(other_shopper):
    return auth_headers(other_shopper)
