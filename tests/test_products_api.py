def test_list_products_is_public_and_paginated(client, products):
    res = client.get("/api/products", params={"page_size": 2})

    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert [p["name"] for p in body["items"]] == ["Wireless Mouse", "Gaming Headset"]


def test_keyword_search_matches_name_brand_or_category(client, products):
    res = client.get("/api/products", params={"keyword": "kitchen"})
    assert [p["name"] for p in res.json()["items"]] == ["Coffee Mug"]

    res = client.get("/api/products", params={"keyword": "sony"})
    assert [p["name"] for p in res.json()["items"]] == ["Gaming Headset"]


def test_get_product_and_not_found(client, products):
    res = client.get(f"/api/products/{products[0].id}")
    assert res.status_code == 200
    assert res.json()["count_in_stock"] == 5
    assert float(res.json()["price"]) == 10.0

    res = client.get("/api/products/9999")
    assert res.status_code == 404
    assert res.json()["detail"] == "Product not found"


def test_admin_can_create_update_and_delete(client, admin_headers):
    payload = {
        "name": "Desk Lamp", "image": "/images/lamp.jpg", "brand": "Ikea",
        "category": "Home", "description": "Warm light", "price": "19.99", "count_in_stock": 4,
    }
    res = client.post("/api/products", json=payload, headers=admin_headers)
    assert res.status_code == 201
    product_id = res.json()["id"]

    res = client.put(f"/api/products/{product_id}", json={**payload, "price": "17.50", "count_in_stock": 9},
                     headers=admin_headers)
    assert res.status_code == 200
    assert float(res.json()["price"]) == 17.5
    assert res.json()["count_in_stock"] == 9

    res = client.delete(f"/api/products/{product_id}", headers=admin_headers)
    assert res.status_code == 200
    assert client.get(f"/api/products/{product_id}").status_code == 404


def test_shopper_cannot_manage_products(client, shopper_headers, products):
    payload = {"name": "Nope", "price": "1.00", "count_in_stock": 1}

    res = client.post("/api/products", json=payload, headers=shopper_headers)
    assert res.status_code == 403
    assert res.json()["detail"] == "Not authorized as an admin"

    res = client.delete(f"/api/products/{products[0].id}", headers=shopper_headers)
    assert res.status_code == 403


def test_negative_stock_is_rejected(client, admin_headers):
    res = client.post("/api/products", json={"name": "Bad", "price": "1.00", "count_in_stock": -1},
                      headers=admin_headers)
    assert res.status_code == 422
