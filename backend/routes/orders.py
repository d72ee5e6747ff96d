# backend/routes/orders.py
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from utils.tokenJWT import get_current_user, get_current_admin
from utils.audit import write_log, client_ip
from models.users import User
from models.product import Product
from models.order import Order, OrderItem
from schemas.cart import ShippingAddress
from schemas.order import OrderCreatePayload, OrderResponse, OrderItemOut, PaymentResult
from services.pricing import PricingPolicy, compute_prices, round_money
from services.order_lifecycle import OrderTransitionError, order_status, pay_order, deliver_order

router = APIRouter(prefix="/api/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items: List[OrderItemOut] = [
        OrderItemOut(
            product_id=it.product_id,
            name=it.name,
            image=it.image,
            qty=it.qty,
            price=round_money(it.price),
        )
        for it in order.items
    ]
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        user_name=order.user.name if order.user else None,
        order_items=items,
        shipping_address=ShippingAddress(
            address=order.shipping_address,
            city=order.shipping_city,
            postal_code=order.shipping_postal_code,
            country=order.shipping_country,
        ),
        payment_method=order.payment_method,
        payment_result=order.payment_result,
        items_price=round_money(order.items_price),
        shipping_price=round_money(order.shipping_price),
        tax_price=round_money(order.tax_price),
        total_price=round_money(order.total_price),
        status=order_status(order).value,
        is_paid=order.is_paid,
        paid_at=order.paid_at,
        is_delivered=order.is_delivered,
        delivered_at=order.delivered_at,
        created_at=order.created_at,
    )


def _load_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).options(
        joinedload(Order.items), joinedload(Order.user)
    ).filter(Order.id == order_id).first()


# Owners see their own orders, admins see everything; anything else is reported as missing
def _get_visible_order(db: Session, order_id: int, user: User) -> Order:
    order = _load_order(db, order_id)
    if not order or (order.user_id != user.id and not user.is_admin):
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _create_order(
    db: Session,
    user: User,
    payload: OrderCreatePayload,
    request: Optional[Request] = None,
    policy: Optional[PricingPolicy] = None,
) -> Order:
    """
    Persists an order from a cart snapshot.
    Line prices come from the catalogue and totals are recomputed; submitted prices are ignored.
    """
    if not payload.order_items:
        raise HTTPException(status_code=400, detail="No order items")

    # One line per product; repeated lines are merged in first-seen order
    quantities: Dict[int, int] = {}
    for line in payload.order_items:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.qty

    order_items: List[OrderItem] = []
    for product_id, qty in quantities.items():
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
        if qty > product.count_in_stock:
            raise HTTPException(status_code=400, detail=f"Insufficient stock for: {product.name}")
        order_items.append(OrderItem(
            product_id=product.id,
            name=product.name,
            image=product.image,
            qty=qty,
            price=round_money(product.price),
        ))

    prices = compute_prices(order_items, policy)
    address = payload.shipping_address

    order = Order(
        user_id=user.id,
        shipping_address=address.address,
        shipping_city=address.city,
        shipping_postal_code=address.postal_code,
        shipping_country=address.country,
        payment_method=payload.payment_method,
        items_price=prices.items_price,
        shipping_price=prices.shipping_price,
        tax_price=prices.tax_price,
        total_price=prices.total_price,
        items=order_items,
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    if payload.total_price is not None and round_money(payload.total_price) != prices.total_price:
        logger.warning(
            "Order %s: submitted total %s differs from computed %s",
            order.id, payload.total_price, prices.total_price,
        )

    write_log(
        db, user_id=user.id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_id": order.id, "items": len(order_items), "total": str(prices.total_price)},
    )
    return order


# Create an order from the submitted cart snapshot
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = _create_order(db, current_user, payload, request)
    return _order_to_out(_load_order(db, order.id))


# Orders of the signed-in user, newest first
@router.get("/mine", response_model=List[OrderResponse])
def list_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    orders = db.query(Order).options(
        joinedload(Order.items), joinedload(Order.user)
    ).filter(Order.user_id == current_user.id).order_by(Order.id.desc()).all()
    return [_order_to_out(o) for o in orders]


# All orders (Admin only)
@router.get("", response_model=List[OrderResponse])
def list_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    orders = db.query(Order).options(
        joinedload(Order.items), joinedload(Order.user)
    ).order_by(Order.id.desc()).all()
    return [_order_to_out(o) for o in orders]


# Get details of a specific order
@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _order_to_out(_get_visible_order(db, order_id, current_user))


# Mark an order as paid (owner or admin)
@router.put("/{order_id}/pay", response_model=OrderResponse)
def pay(
    order_id: int,
    request: Request,
    payment_result: Optional[PaymentResult] = Body(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = _get_visible_order(db, order_id, current_user)

    try:
        pay_order(order, payment_result.model_dump(exclude_none=True) if payment_result else None)
    except OrderTransitionError as e:
        write_log(db, user_id=current_user.id, action="ORDER_PAY", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"order_id": order_id, "reason": str(e)})
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    write_log(db, user_id=current_user.id, action="ORDER_PAY", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order_id})
    return _order_to_out(_load_order(db, order_id))


# Mark a paid order as delivered (Admin only)
@router.put("/{order_id}/deliver", response_model=OrderResponse)
def deliver(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    order = _load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    try:
        deliver_order(order)
    except OrderTransitionError as e:
        write_log(db, user_id=current_user.id, action="ORDER_DELIVER", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"order_id": order_id, "reason": str(e)})
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    write_log(db, user_id=current_user.id, action="ORDER_DELIVER", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order_id})
    return _order_to_out(_load_order(db, order_id))
