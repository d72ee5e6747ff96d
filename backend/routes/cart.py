# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.storage import DbStorage
from models.users import User
from models.product import Product
from schemas.cart import (
    CartAddItem, CartItem, CartState, CheckoutResult,
    PaymentMethodIn, ShippingAddress, ShippingAddressIn,
)
from schemas.order import OrderCreatePayload
from services.cart_store import CartStore
from services.checkout import ApiError, CheckoutStep, checkout_redirect, submit_order
from routes.orders import _create_order

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _open_store(db: Session, user: User) -> CartStore:
    # Rehydrate the user's cart from its storage key
    return CartStore(DbStorage(db, user.id))


@router.get("", response_model=CartState)
def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _open_store(db, current_user).state


@router.post("/items", response_model=CartState)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    product = db.query(Product).filter(Product.id == payload.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    # Name, price and stock are synced from the catalogue on every add
    item = CartItem(
        product_id=product.id,
        name=product.name,
        image=product.image,
        price=product.price,
        count_in_stock=product.count_in_stock,
        qty=payload.qty,
    )
    state = _open_store(db, current_user).add_item(item, payload.qty)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": product.id, "qty": payload.qty, "cart_items": len(state.items), "total": str(state.total_price)},
    )
    return state


@router.delete("/items/{product_id}", response_model=CartState)
def remove_from_cart(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    state = _open_store(db, current_user).remove_item(product_id)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": product_id, "cart_items": len(state.items), "total": str(state.total_price)},
    )
    return state


@router.delete("/items", response_model=CartState)
def clear_cart_items(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _open_store(db, current_user).clear_items()


@router.put("/shipping", response_model=CartState)
def save_shipping_address(
    payload: ShippingAddressIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _open_store(db, current_user).save_shipping_address(ShippingAddress(**payload.model_dump()))


@router.put("/payment", response_model=CartState)
def save_payment_method(
    payload: PaymentMethodIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _open_store(db, current_user).save_payment_method(payload.payment_method)


# Step guard: where should the shopper be sent before showing this step
@router.get("/checkout/{step}", response_model=CheckoutResult)
def check_step(
    step: CheckoutStep,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    redirect = checkout_redirect(_open_store(db, current_user).state, step)
    if redirect:
        return CheckoutResult(success=False, redirect=redirect.step.path, message=redirect.message)
    return CheckoutResult(success=True, redirect=step.path)


# Place the order from the stored cart
@router.post("/checkout", response_model=CheckoutResult)
def checkout(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    store = _open_store(db, current_user)

    def create_order(payload: dict) -> dict:
        try:
            order = _create_order(db, current_user, OrderCreatePayload.model_validate(payload), request)
        except HTTPException as e:
            raise ApiError(e.detail, e.status_code)
        except ValidationError:
            raise ApiError(status_code=422)
        return {"id": order.id}

    result = submit_order(store, create_order)
    if not result.success and result.redirect is None:
        write_log(
            db, user_id=current_user.id, action="CHECKOUT", resource="cart", status="FAIL",
            ip=client_ip(request), meta={"reason": result.message},
        )
    return result
