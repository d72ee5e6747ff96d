# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, CheckConstraint, func
from database import Base

# Model Product
# A single catalogue entry offered in the storefront.
# Price is kept as an exact decimal; count_in_stock caps cart quantities.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True) # Admin who created the entry
    name = Column(String, nullable=False, index=True)
    image = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    description = Column(String, nullable=True)

    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False, default=0)
    count_in_stock = Column(Integer, CheckConstraint("count_in_stock >= 0"), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
