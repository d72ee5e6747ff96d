# backend/schemas/product.py
from decimal import Decimal
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    image: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Field(ge=0, decimal_places=2)
    count_in_stock: int = Field(ge=0)


# Schema for creating or fully replacing a product
class ProductCreate(ProductBase):
    pass


# Full product representation including ID
class ProductOut(ProductBase):
    id: int
    created_at: Optional[datetime] = None


# Paginated response for product listings
class ProductListPage(ORMBase):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
    pages: int
