def budget_payload(**overrides):
    payload = {
        "category_id": "default-03",
        "amount": 200,
        "period": "monthly",
        "start_date": "2025-11-01",
    }
    payload.update(overrides)
    return payload


def add_expense(client, headers, category_id, amount, description="Expense"):
    response = client.post(
        "/api/transactions/",
        json={"description": description, "amount": amount, "date": "2025-11-05", "category_id": category_id},
        headers=headers,
    )
    assert response.status_code == 201


def test_create_budget_defaults(client, auth_headers):
    response = client.post("/api/budgets/", json=budget_payload(), headers=auth_headers)

    assert response.status_code == 201
    budget = response.json()
    assert budget["alert_threshold"] == 80
    assert budget["end_date"] == "2025-11-01"
    assert budget["user_id"] == "user-1"


def test_create_budget_validation(client, auth_headers):
    unknown = client.post("/api/budgets/", json=budget_payload(category_id="nope"), headers=auth_headers)
    assert unknown.status_code == 400

    backwards = client.post(
        "/api/budgets/", json=budget_payload(start_date="2025-11-10", end_date="2025-11-01"), headers=auth_headers
    )
    assert backwards.status_code == 400
    assert backwards.json()["detail"] == "Validation error"

    threshold = client.post("/api/budgets/", json=budget_payload(alert_threshold=150), headers=auth_headers)
    assert threshold.status_code == 400
    assert threshold.json()["errors"][0]["field"] == "alert_threshold"


def test_spending_and_alerts(client, auth_headers, sent_emails):
    client.post("/api/budgets/", json=budget_payload(category_id="default-03", amount=200), headers=auth_headers)
    client.post("/api/budgets/", json=budget_payload(category_id="default-04", amount=50), headers=auth_headers)
    add_expense(client, auth_headers, "default-03", 50)
    add_expense(client, auth_headers, "default-04", 60)

    spending = client.get("/api/budgets/spending", headers=auth_headers).json()
    assert sorted(spending, key=lambda s: s["category_id"]) == [
        {"category_id": "default-03", "spent": 50},
        {"category_id": "default-04", "spent": 60},
    ]

    alerts = client.get("/api/budgets/alerts", headers=auth_headers).json()
    assert [(a["category_id"], a["percent_spent"], a["is_exceeded"]) for a in alerts] == [
        ("default-04", 120, True),
    ]


def test_other_users_budget(client, auth_headers, other_headers):
    budget_id = client.post("/api/budgets/", json=budget_payload(), headers=auth_headers).json()["budget_id"]

    assert client.get(f"/api/budgets/{budget_id}", headers=other_headers).status_code == 403
    assert client.patch(f"/api/budgets/{budget_id}", json={"amount": 1}, headers=other_headers).status_code == 403
    assert client.delete(f"/api/budgets/{budget_id}", headers=other_headers).status_code == 403
    assert client.get("/api/budgets/no-such-budget", headers=auth_headers).status_code == 404


def test_update_and_delete_budget(client, auth_headers):
    budget_id = client.post("/api/budgets/", json=budget_payload(), headers=auth_headers).json()["budget_id"]

    updated = client.patch(f"/api/budgets/{budget_id}", json={"amount": 300}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["amount"] == 300

    backwards = client.patch(f"/api/budgets/{budget_id}", json={"end_date": "2025-10-01"}, headers=auth_headers)
    assert backwards.status_code == 400

    assert client.patch(f"/api/budgets/{budget_id}", json={}, headers=auth_headers).status_code == 400

    assert client.delete(f"/api/budgets/{budget_id}", headers=auth_headers).status_code == 204
    assert client.get("/api/budgets/", headers=auth_headers).json() == []


def test_budget_with_deleted_category_is_ignored(client, auth_headers, sent_emails):
    category = client.post("/api/categories/", json={"name": "Coffee"}, headers=auth_headers).json()
    client.post(
        "/api/budgets/", json=budget_payload(category_id=category["category_id"], amount=10), headers=auth_headers
    )
    add_expense(client, auth_headers, category["category_id"], 25, description="Espresso beans")

    assert len(client.get("/api/budgets/alerts", headers=auth_headers).json()) == 1

    assert client.delete(f"/api/categories/{category['category_id']}", headers=auth_headers).status_code == 204
    assert client.get("/api/budgets/alerts", headers=auth_headers).json() == []


def test_patch_rejects_null_for_required_fields(client, auth_headers, sent_emails):
    budget_id = client.post("/api/budgets/", json=budget_payload(amount=50), headers=auth_headers).json()["budget_id"]
    add_expense(client, auth_headers, "default-03", 60)

    for field in ("amount", "category_id", "alert_threshold", "start_date", "period"):
        response = client.patch(f"/api/budgets/{budget_id}", json={field: None}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field

    assert client.get(f"/api/budgets/{budget_id}", headers=auth_headers).json()["amount"] == 50
    alerts = client.get("/api/budgets/alerts", headers=auth_headers)
    assert alerts.status_code == 200
    assert alerts.json()[0]["is_exceeded"] is True


def test_patch_can_clear_end_date(client, auth_headers):
    budget_id = client.post(
        "/api/budgets/", json=budget_payload(end_date="2025-11-30"), headers=auth_headers
    ).json()["budget_id"]

    cleared = client.patch(f"/api/budgets/{budget_id}", json={"end_date": None}, headers=auth_headers)

    assert cleared.status_code == 200
    assert cleared.json()["end_date"] is None
