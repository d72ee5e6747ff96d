# backend/services/pricing.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from config import settings

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, float, int, str]


def to_decimal(value: Number) -> Decimal:
    # str() first so floats like 0.1 keep their printed value
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    """Round to whole cents, halves away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingPolicy:
    """Shipping and tax rules applied to a set of line items.

    Shipping is a flat price unless the items price exceeds
    ``free_shipping_threshold``; an empty basket ships for free.
    Tax is ``tax_rate`` times the items price.
    """
    shipping_price: Decimal = Decimal("10.00")
    free_shipping_threshold: Optional[Decimal] = Decimal("100.00")
    tax_rate: Decimal = Decimal("0.15")

    @classmethod
    def from_settings(cls) -> "PricingPolicy":
        return cls(
            shipping_price=round_money(settings.SHIPPING_PRICE),
            free_shipping_threshold=round_money(settings.FREE_SHIPPING_THRESHOLD),
            tax_rate=to_decimal(settings.TAX_RATE),
        )


@dataclass(frozen=True)
class PriceBreakdown:
    items_price: Decimal
    shipping_price: Decimal
    tax_price: Decimal
    total_price: Decimal


def items_total(items: Iterable) -> Decimal:
    return round_money(sum((to_decimal(it.price) * it.qty for it in items), ZERO))


def compute_prices(items: Iterable, policy: Optional[PricingPolicy] = None) -> PriceBreakdown:
    # items only need .price and .qty (cart lines and order lines both qualify)
    policy = policy or PricingPolicy.from_settings()
    items = list(items)

    items_price = items_total(items)

    if not items:
        shipping_price = ZERO
    elif policy.free_shipping_threshold is not None and items_price > policy.free_shipping_threshold:
        shipping_price = ZERO
    else:
        shipping_price = round_money(policy.shipping_price)

    tax_price = round_money(to_decimal(policy.tax_rate) * items_price)
    total_price = round_money(items_price + shipping_price + tax_price)

    return PriceBreakdown(
        items_price=items_price,
        shipping_price=shipping_price,
        tax_price=tax_price,
        total_price=total_price,
    )
