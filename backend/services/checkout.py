# backend/services/checkout.py
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from schemas.cart import CartState, CheckoutResult
from services.cart_store import CartStore

logger = logging.getLogger(__name__)

GENERIC_ORDER_ERROR = "Failed to place order"


class CheckoutStep(str, enum.Enum):
    CART = "cart"
    SHIPPING = "shipping"
    PAYMENT = "payment"
    PLACE_ORDER = "placeorder"

    @property
    def path(self) -> str:
        return f"/{self.value}"


class ApiError(Exception):
    """Error reported by the order API, carrying the message shown to the shopper."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or GENERIC_ORDER_ERROR
        self.status_code = status_code
        super().__init__(self.message)


@dataclass(frozen=True)
class CheckoutRedirect:
    step: CheckoutStep
    message: str


def checkout_redirect(cart: CartState, step: CheckoutStep = CheckoutStep.PLACE_ORDER) -> Optional[CheckoutRedirect]:
    """Return the earlier checkout step that still needs input, or None when ``step`` can be shown."""
    if step in (CheckoutStep.PAYMENT, CheckoutStep.PLACE_ORDER):
        if not cart.shipping_address.address:
            return CheckoutRedirect(CheckoutStep.SHIPPING, "Please complete shipping address first")
    if step == CheckoutStep.PLACE_ORDER:
        if not cart.payment_method:
            return CheckoutRedirect(CheckoutStep.PAYMENT, "Please select a payment method first")
        if not cart.items:
            return CheckoutRedirect(CheckoutStep.CART, "Your cart is empty")
    return None


def build_order_payload(cart: CartState) -> Dict[str, Any]:
    # JSON-ready snapshot of the cart; decimals become strings
    data = cart.model_dump(mode="json")
    return {
        "order_items": data["items"],
        "shipping_address": data["shipping_address"],
        "payment_method": data["payment_method"],
        "items_price": data["items_price"],
        "shipping_price": data["shipping_price"],
        "tax_price": data["tax_price"],
        "total_price": data["total_price"],
    }


def submit_order(store: CartStore, create_order: Callable[[Dict[str, Any]], Dict[str, Any]]) -> CheckoutResult:
    """Place an order from the current cart through ``create_order``.

    ``create_order`` receives the payload and returns the created order as a
    dict with an ``id``; it raises ``ApiError`` on failure. The gateway is
    never called while an earlier checkout step is incomplete. Items are
    cleared only after the order exists; on failure the cart is left as is
    so the shopper can retry.
    """
    redirect = checkout_redirect(store.state, CheckoutStep.PLACE_ORDER)
    if redirect:
        return CheckoutResult(success=False, redirect=redirect.step.path, message=redirect.message)

    try:
        order = create_order(build_order_payload(store.state))
    except ApiError as e:
        logger.info("Order submission failed: %s", e.message)
        return CheckoutResult(success=False, message=e.message)

    store.clear_items()
    order_id = order["id"]
    return CheckoutResult(
        success=True,
        redirect=f"/order/{order_id}",
        message="Order placed successfully!",
        order_id=order_id,
    )
