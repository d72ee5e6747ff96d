def test_logs_are_admin_only(client, shopper_headers):
    assert client.get("/api/logs", headers=shopper_headers).status_code == 403


def test_logs_filter_by_action_and_status(client, admin_headers, shopper):
    client.post("/api/users/login", json={"email": "john@example.com", "password": "secret123"})
    client.post("/api/users/login", json={"email": "john@example.com", "password": "wrong-one"})

    res = client.get("/api/logs", params={"action": "login"}, headers=admin_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 2
    assert [row["status"] for row in body["items"]] == ["FAIL", "SUCCESS"]

    res = client.get("/api/logs", params={"action": "LOGIN", "status": "fail"}, headers=admin_headers)
    assert res.json()["total"] == 1
    assert res.json()["items"][0]["user_id"] == shopper.id
    assert res.json()["items"][0]["meta"] == {"email": "john@example.com"}
