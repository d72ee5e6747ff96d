from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Single cart line, keyed by product_id inside a cart
class CartItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    name: str
    image: Optional[str] = None
    price: Decimal = Field(ge=0)
    count_in_stock: int = Field(ge=0)
    qty: int = 1


# Shipping address as stored by the cart (kept verbatim)
class ShippingAddress(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""


# Whole cart document, persisted under a single storage key
class CartState(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[CartItem] = Field(default_factory=list)
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    payment_method: str = ""
    items_price: Decimal = Decimal("0.00")
    shipping_price: Decimal = Decimal("0.00")
    tax_price: Decimal = Decimal("0.00")
    total_price: Decimal = Decimal("0.00")


# Request schema for adding an item to the cart (or changing its quantity)
class CartAddItem(BaseModel):
    product_id: int
    qty: int = 1


# Request schema for the shipping step; every field is required
class ShippingAddressIn(BaseModel):
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    country: str = Field(min_length=1)


# Request schema for the payment step
class PaymentMethodIn(BaseModel):
    payment_method: str = Field(min_length=1)


# Outcome of a checkout step guard or an order submission
class CheckoutResult(BaseModel):
    success: bool
    redirect: Optional[str] = None
    message: Optional[str] = None
    order_id: Optional[int] = None
