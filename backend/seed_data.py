# backend/seed_data.py
# Usage: python seed_data.py [--destroy]
import sys
from decimal import Decimal

from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.users import User
from models.product import Product
from models.order import Order, OrderItem
from models.storage import StoredState
from models.log import Log
from utils.hashing import get_password_hash

USERS = [
    {"name": "Admin User", "email": "admin@example.com", "password": "123456", "is_admin": True},
    {"name": "John Doe", "email": "john@example.com", "password": "123456", "is_admin": False},
    {"name": "Jane Doe", "email": "jane@example.com", "password": "123456", "is_admin": False},
]

PRODUCTS = [
    {"name": "Airpods Wireless Bluetooth Headphones", "image": "/images/airpods.jpg", "brand": "Apple",
     "category": "Electronics", "price": "89.99", "count_in_stock": 10,
     "description": "Bluetooth technology lets you connect it with compatible devices wirelessly."},
    {"name": "iPhone 13 Pro 256GB Memory", "image": "/images/phone.jpg", "brand": "Apple",
     "category": "Electronics", "price": "599.99", "count_in_stock": 7,
     "description": "Introducing the iPhone 13 Pro. A transformative triple-camera system."},
    {"name": "Cannon EOS 80D DSLR Camera", "image": "/images/camera.jpg", "brand": "Cannon",
     "category": "Electronics", "price": "929.99", "count_in_stock": 5,
     "description": "Characterized by versatile imaging specs, the Canon EOS 80D."},
    {"name": "Sony Playstation 5", "image": "/images/playstation.jpg", "brand": "Sony",
     "category": "Electronics", "price": "399.99", "count_in_stock": 11,
     "description": "The ultimate home entertainment center starts with PlayStation."},
    {"name": "Logitech G-Series Gaming Mouse", "image": "/images/mouse.jpg", "brand": "Logitech",
     "category": "Electronics", "price": "49.99", "count_in_stock": 7,
     "description": "Get a better handle on your games with this Logitech LIGHTSYNC gaming mouse."},
    {"name": "Amazon Echo Dot 3rd Generation", "image": "/images/alexa.jpg", "brand": "Amazon",
     "category": "Electronics", "price": "29.99", "count_in_stock": 0,
     "description": "Meet Echo Dot, our most popular smart speaker with a fabric design."},
]


def destroy_data(db: Session):
    for model in (OrderItem, Order, StoredState, Log, Product, User):
        db.query(model).delete()
    db.commit()
    print("Data destroyed.")


def import_data(db: Session):
    destroy_data(db)

    admin = None
    for u in USERS:
        user = User(
            name=u["name"],
            email=u["email"],
            password_hash=get_password_hash(u["password"]),
            is_admin=u["is_admin"],
        )
        db.add(user)
        if u["is_admin"]:
            admin = user
    db.flush()

    for p in PRODUCTS:
        db.add(Product(user_id=admin.id, **{**p, "price": Decimal(p["price"])}))

    db.commit()
    print(f"Imported {len(USERS)} users and {len(PRODUCTS)} products.")


def main():
    init_db()
    db = SessionLocal()
    try:
        if "--destroy" in sys.argv[1:]:
            destroy_data(db)
        else:
            import_data(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
