from datetime import datetime, timedelta

from smartbudget.core.config import settings


def due_in(days):
    return (datetime.utcnow().date() + timedelta(days=days)).isoformat()


def create_bill(client, headers, name, days, **overrides):
    payload = {"name": name, "amount": 75.25, "due_date": due_in(days), "reminder_days": 3}
    payload.update(overrides)
    response = client.post("/api/bills/", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


def test_upcoming_bills(client, auth_headers):
    create_bill(client, auth_headers, "Internet", 5)
    create_bill(client, auth_headers, "Phone", 2)
    create_bill(client, auth_headers, "Water", 1, is_paid=True)
    create_bill(client, auth_headers, "Insurance", 30)
    create_bill(client, auth_headers, "Overdue", -2)

    upcoming = client.get("/api/bills/upcoming", headers=auth_headers).json()
    assert [b["name"] for b in upcoming] == ["Phone", "Internet"]

    wide = client.get("/api/bills/upcoming?days=30", headers=auth_headers).json()
    assert [b["name"] for b in wide] == ["Phone", "Internet", "Insurance"]


def test_mark_bill_paid(client, auth_headers, other_headers):
    bill = create_bill(client, auth_headers, "Phone", 2)

    assert client.patch(f"/api/bills/{bill['bill_id']}", json={"is_paid": True}, headers=other_headers).status_code == 403
    paid = client.patch(f"/api/bills/{bill['bill_id']}", json={"is_paid": True}, headers=auth_headers)
    assert paid.status_code == 200
    assert paid.json()["is_paid"] is True
    assert client.get("/api/bills/upcoming", headers=auth_headers).json() == []


def test_bill_validation(client, auth_headers):
    response = client.post(
        "/api/bills/",
        json={"name": "Gym", "amount": 30, "due_date": due_in(3), "recurring_period": "fortnightly"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "recurring_period"


def test_check_my_bill_reminders(client, auth_headers, sent_emails):
    create_bill(client, auth_headers, "Phone", 1)
    create_bill(client, auth_headers, "Internet", 10)

    response = client.post("/api/bill-reminders/check", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["reminders_due"] == 1
    assert body["emails_sent"] == 1
    assert sent_emails[0]["subject"] == "URGENT: Bill Payment Reminder: Phone due in 1 day"


def test_admin_bill_reminders_requires_key(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_KEY", "s3cret")

    assert client.post("/api/admin/bill-reminders/check", json={"api_key": "wrong"}).status_code == 403


def test_admin_bill_reminders_disabled_without_key(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_KEY", None)

    assert client.post("/api/admin/bill-reminders/check", json={"api_key": ""}).status_code == 403


def test_admin_bill_reminders_runs_for_all_users(client, auth_headers, other_headers, sent_emails, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_KEY", "s3cret")
    create_bill(client, auth_headers, "Phone", 0)
    create_bill(client, other_headers, "Rent", 3)

    response = client.post("/api/admin/bill-reminders/check", json={"api_key": "s3cret"})

    assert response.status_code == 200
    body = response.json()
    assert body["users_processed"] == 2
    assert body["emails_sent"] == 2
    assert sorted(email["to"] for email in sent_emails) == ["alice@example.com", "bob@example.com"]


def test_patch_rejects_null_for_required_fields(client, auth_headers, sent_emails):
    bill = create_bill(client, auth_headers, "Phone", 1)

    for field in ("reminder_days", "due_date", "amount", "name", "is_paid"):
        response = client.patch(f"/api/bills/{bill['bill_id']}", json={field: None}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field

    response = client.post("/api/bill-reminders/check", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["reminders_due"] == 1
    assert [b["name"] for b in client.get("/api/bills/upcoming", headers=auth_headers).json()] == ["Phone"]
