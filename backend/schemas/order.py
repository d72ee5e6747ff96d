from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from schemas.cart import ShippingAddress, ShippingAddressIn


# Line item as submitted from the cart; only product_id and qty are trusted
class OrderItemIn(BaseModel):
    product_id: int
    qty: int = Field(ge=1)
    name: Optional[str] = None
    image: Optional[str] = None
    price: Optional[Decimal] = None
    count_in_stock: Optional[int] = None


# Input schema for creating an order from a cart snapshot
class OrderCreatePayload(BaseModel):
    order_items: List[OrderItemIn]
    shipping_address: ShippingAddressIn
    payment_method: str = Field(min_length=1)
    items_price: Optional[Decimal] = None
    shipping_price: Optional[Decimal] = None
    tax_price: Optional[Decimal] = None
    total_price: Optional[Decimal] = None


# Optional gateway confirmation sent with a payment
class PaymentResult(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    update_time: Optional[str] = None
    email_address: Optional[str] = None


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    product_id: Optional[int] = None
    name: str
    image: Optional[str] = None
    qty: int
    price: Decimal


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    order_items: List[OrderItemOut]
    shipping_address: ShippingAddress
    payment_method: str
    payment_result: Optional[Dict[str, Any]] = None
    items_price: Decimal
    shipping_price: Decimal
    tax_price: Decimal
    total_price: Decimal
    status: str
    is_paid: bool
    paid_at: Optional[datetime] = None
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
