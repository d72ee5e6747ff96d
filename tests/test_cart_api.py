from decimal import Decimal

from models.storage import StoredState
from services.cart_store import CART_STORAGE_KEY

SHIPPING = {"address": "1 Main St", "city": "Springfield", "postal_code": "12345", "country": "US"}


def test_new_cart_is_empty(client, shopper_headers):
    res = client.get("/api/cart", headers=shopper_headers)

    assert res.status_code == 200
    cart = res.json()
    assert cart["items"] == []
    assert Decimal(cart["total_price"]) == Decimal("0.00")
    assert cart["payment_method"] == ""


def test_add_item_syncs_catalogue_and_clamps_quantity(client, shopper_headers, products):
    res = client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 50}, headers=shopper_headers)

    assert res.status_code == 200
    line = res.json()["items"][0]
    assert line["name"] == "Wireless Mouse"
    assert line["count_in_stock"] == 5
    assert line["qty"] == 5
    assert Decimal(res.json()["items_price"]) == Decimal("50.00")


def test_add_unknown_product(client, shopper_headers):
    res = client.post("/api/cart/items", json={"product_id": 9999, "qty": 1}, headers=shopper_headers)
    assert res.status_code == 404


def test_cart_persists_under_one_key_per_user(client, db, shopper, shopper_headers, other_headers, products):
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 2}, headers=shopper_headers)
    client.post("/api/cart/items", json={"product_id": products[1].id, "qty": 1}, headers=shopper_headers)

    rows = db.query(StoredState).filter(StoredState.user_id == shopper.id).all()
    assert [r.key for r in rows] == [CART_STORAGE_KEY]

    cart = client.get("/api/cart", headers=shopper_headers).json()
    assert [it["product_id"] for it in cart["items"]] == [products[0].id, products[1].id]
    # 20 + 60 = 80 -> flat shipping, 15% tax
    assert Decimal(cart["items_price"]) == Decimal("80.00")
    assert Decimal(cart["shipping_price"]) == Decimal("10.00")
    assert Decimal(cart["tax_price"]) == Decimal("12.00")
    assert Decimal(cart["total_price"]) == Decimal("102.00")

    assert client.get("/api/cart", headers=other_headers).json()["items"] == []


def test_remove_and_clear_items(client, shopper_headers, products):
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 1}, headers=shopper_headers)
    client.post("/api/cart/items", json={"product_id": products[1].id, "qty": 1}, headers=shopper_headers)
    client.put("/api/cart/payment", json={"payment_method": "PayPal"}, headers=shopper_headers)

    res = client.delete(f"/api/cart/items/{products[0].id}", headers=shopper_headers)
    assert [it["product_id"] for it in res.json()["items"]] == [products[1].id]

    res = client.delete("/api/cart/items", headers=shopper_headers)
    assert res.json()["items"] == []
    assert res.json()["payment_method"] == "PayPal"


def test_shipping_form_requires_every_field(client, shopper_headers):
    res = client.put("/api/cart/shipping", json={**SHIPPING, "postal_code": ""}, headers=shopper_headers)
    assert res.status_code == 422

    res = client.put("/api/cart/shipping", json=SHIPPING, headers=shopper_headers)
    assert res.status_code == 200
    assert res.json()["shipping_address"] == SHIPPING


def test_step_guard(client, shopper_headers, products):
    res = client.get("/api/cart/checkout/payment", headers=shopper_headers).json()
    assert res["success"] is False
    assert res["redirect"] == "/shipping"

    client.put("/api/cart/shipping", json=SHIPPING, headers=shopper_headers)
    res = client.get("/api/cart/checkout/placeorder", headers=shopper_headers).json()
    assert res["redirect"] == "/payment"

    client.put("/api/cart/payment", json={"payment_method": "PayPal"}, headers=shopper_headers)
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 1}, headers=shopper_headers)
    res = client.get("/api/cart/checkout/placeorder", headers=shopper_headers).json()
    assert res == {"success": True, "redirect": "/placeorder", "message": None, "order_id": None}


def test_checkout_without_address_does_not_create_order(client, shopper_headers, products):
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 1}, headers=shopper_headers)
    client.put("/api/cart/payment", json={"payment_method": "PayPal"}, headers=shopper_headers)

    res = client.post("/api/cart/checkout", headers=shopper_headers).json()

    assert res["success"] is False
    assert res["redirect"] == "/shipping"
    assert client.get("/api/orders/mine", headers=shopper_headers).json() == []


def test_checkout_places_order_and_clears_items(client, shopper_headers, products):
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 2}, headers=shopper_headers)
    client.put("/api/cart/shipping", json=SHIPPING, headers=shopper_headers)
    client.put("/api/cart/payment", json={"payment_method": "PayPal"}, headers=shopper_headers)

    res = client.post("/api/cart/checkout", headers=shopper_headers).json()

    assert res["success"] is True
    assert res["redirect"] == f"/order/{res['order_id']}"

    order = client.get(f"/api/orders/{res['order_id']}", headers=shopper_headers).json()
    assert Decimal(order["total_price"]) == Decimal("33.00")

    cart = client.get("/api/cart", headers=shopper_headers).json()
    assert cart["items"] == []
    assert cart["shipping_address"] == SHIPPING
    assert cart["payment_method"] == "PayPal"


def test_checkout_failure_keeps_cart(client, db, shopper_headers, products):
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 3}, headers=shopper_headers)
    client.put("/api/cart/shipping", json=SHIPPING, headers=shopper_headers)
    client.put("/api/cart/payment", json={"payment_method": "PayPal"}, headers=shopper_headers)

    # Stock drops after the item was added
    products[0].count_in_stock = 1
    db.commit()

    res = client.post("/api/cart/checkout", headers=shopper_headers).json()

    assert res["success"] is False
    assert res["redirect"] is None
    assert res["message"] == "Insufficient stock for: Wireless Mouse"
    assert len(client.get("/api/cart", headers=shopper_headers).json()["items"]) == 1


def test_logout_resets_stored_cart(client, shopper_headers, products):
    client.post("/api/cart/items", json={"product_id": products[0].id, "qty": 1}, headers=shopper_headers)
    client.put("/api/cart/payment", json={"payment_method": "PayPal"}, headers=shopper_headers)

    res = client.post("/api/users/logout", headers=shopper_headers)
    assert res.status_code == 200

    cart = client.get("/api/cart", headers=shopper_headers).json()
    assert cart["items"] == []
    assert cart["payment_method"] == ""
