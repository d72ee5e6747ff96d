"""
Cart state container.

The cart is a plain ``CartState`` document changed only through
``cart_reducer(state, action)``, which returns a new state and never touches
the one it was given. ``CartStore`` wraps the reducer, persists every new
state to a key/value storage under ``CART_STORAGE_KEY`` and rehydrates from
it on construction.

Quantities above the stock level are clamped silently; a quantity of zero
or less removes the line. Clearing the cart after an order empties the
items only, the shipping address and payment method are kept for the next
checkout.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from pydantic import ValidationError

from schemas.cart import CartItem, CartState, ShippingAddress
from services.pricing import PricingPolicy, compute_prices, round_money

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "storefront:cart"


# ---- ACTIONS ----

@dataclass(frozen=True)
class AddItem:
    item: CartItem
    qty: int


@dataclass(frozen=True)
class RemoveItem:
    product_id: int


@dataclass(frozen=True)
class SaveShippingAddress:
    address: ShippingAddress


@dataclass(frozen=True)
class SavePaymentMethod:
    method: str


@dataclass(frozen=True)
class ClearItems:
    pass


@dataclass(frozen=True)
class ResetCart:
    pass


CartAction = Union[AddItem, RemoveItem, SaveShippingAddress, SavePaymentMethod, ClearItems, ResetCart]


# ---- REDUCER ----

def clamp_qty(qty: int, count_in_stock: int) -> int:
    """Clamp a requested quantity into ``[1, count_in_stock]``."""
    return max(1, min(int(qty), int(count_in_stock)))


def with_prices(state: CartState, policy: Optional[PricingPolicy] = None) -> CartState:
    prices = compute_prices(state.items, policy)
    return state.model_copy(update={
        "items_price": prices.items_price,
        "shipping_price": prices.shipping_price,
        "tax_price": prices.tax_price,
        "total_price": prices.total_price,
    })


def _add_item(items: List[CartItem], item: CartItem, qty: int) -> List[CartItem]:
    if qty <= 0 or item.count_in_stock <= 0:
        return [it for it in items if it.product_id != item.product_id]

    line = item.model_copy(update={
        "qty": clamp_qty(qty, item.count_in_stock),
        "price": round_money(item.price),
    })
    if any(it.product_id == item.product_id for it in items):
        # Replace in place so the line keeps its position
        return [line if it.product_id == item.product_id else it for it in items]
    return items + [line]


def cart_reducer(state: CartState, action: CartAction, policy: Optional[PricingPolicy] = None) -> CartState:
    if isinstance(action, AddItem):
        items = _add_item(list(state.items), action.item, action.qty)
        return with_prices(state.model_copy(update={"items": items}), policy)

    if isinstance(action, RemoveItem):
        items = [it for it in state.items if it.product_id != action.product_id]
        return with_prices(state.model_copy(update={"items": items}), policy)

    if isinstance(action, SaveShippingAddress):
        return state.model_copy(update={"shipping_address": action.address})

    if isinstance(action, SavePaymentMethod):
        return state.model_copy(update={"payment_method": action.method})

    if isinstance(action, ClearItems):
        return with_prices(state.model_copy(update={"items": []}), policy)

    if isinstance(action, ResetCart):
        return with_prices(CartState(), policy)

    raise TypeError(f"Unknown cart action: {action!r}")


# ---- CONTAINER ----

class CartStore:
    """Holds the current cart, applies actions and keeps storage in sync."""

    def __init__(self, storage, policy: Optional[PricingPolicy] = None, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.policy = policy
        self.key = key
        self._listeners: List[Callable[[CartState], None]] = []
        self._state = self._load()

    def _load(self) -> CartState:
        raw = self.storage.get_item(self.key)
        if not raw:
            return with_prices(CartState(), self.policy)
        try:
            state = CartState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable cart under %s: %s", self.key, e)
            return with_prices(CartState(), self.policy)
        # Prices are derived data, recompute them with the current policy
        return with_prices(state, self.policy)

    @property
    def state(self) -> CartState:
        return self._state

    def subscribe(self, listener: Callable[[CartState], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def dispatch(self, action: CartAction) -> CartState:
        self._state = cart_reducer(self._state, action, self.policy)
        self.storage.set_item(self.key, self._state.model_dump_json())
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    # Convenience wrappers, one per action

    def add_item(self, item: CartItem, qty: int) -> CartState:
        return self.dispatch(AddItem(item=item, qty=qty))

    def remove_item(self, product_id: int) -> CartState:
        return self.dispatch(RemoveItem(product_id=product_id))

    def save_shipping_address(self, address: ShippingAddress) -> CartState:
        return self.dispatch(SaveShippingAddress(address=address))

    def save_payment_method(self, method: str) -> CartState:
        return self.dispatch(SavePaymentMethod(method=method))

    def clear_items(self) -> CartState:
        return self.dispatch(ClearItems())

    def reset(self) -> CartState:
        self._state = cart_reducer(self._state, ResetCart(), self.policy)
        self.storage.remove_item(self.key)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state
