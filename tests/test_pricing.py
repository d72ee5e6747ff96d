from decimal import Decimal
from types import SimpleNamespace

from services.pricing import PricingPolicy, compute_prices, round_money


def line(price, qty):
    return SimpleNamespace(price=Decimal(price), qty=qty)


def test_example_breakdown_with_flat_shipping_and_ten_percent_tax():
    policy = PricingPolicy(shipping_price=Decimal("5"), free_shipping_threshold=Decimal("100"), tax_rate=Decimal("0.10"))
    prices = compute_prices([line("10.00", 2)], policy)

    assert prices.items_price == Decimal("20.00")
    assert prices.shipping_price == Decimal("5.00")
    assert prices.tax_price == Decimal("2.00")
    assert prices.total_price == Decimal("27.00")


def test_shipping_is_free_above_threshold():
    policy = PricingPolicy()
    prices = compute_prices([line("60.00", 2)], policy)

    assert prices.items_price == Decimal("120.00")
    assert prices.shipping_price == Decimal("0.00")
    assert prices.tax_price == Decimal("18.00")
    assert prices.total_price == Decimal("138.00")


def test_threshold_itself_still_pays_shipping():
    prices = compute_prices([line("100.00", 1)], PricingPolicy())
    assert prices.shipping_price == Decimal("10.00")


def test_empty_basket_costs_nothing():
    prices = compute_prices([], PricingPolicy())
    assert prices.items_price == prices.shipping_price == prices.tax_price == prices.total_price == Decimal("0.00")


def test_tax_rounds_half_up_to_cents():
    # 0.15 * 0.30 = 0.045 -> 0.05
    prices = compute_prices([line("0.10", 3)], PricingPolicy())
    assert prices.tax_price == Decimal("0.05")
    assert round_money(0.125) == Decimal("0.13")


def test_default_policy_comes_from_settings():
    policy = PricingPolicy.from_settings()
    assert policy.shipping_price == Decimal("10.00")
    assert policy.free_shipping_threshold == Decimal("100.00")
    assert policy.tax_rate == Decimal("0.15")
