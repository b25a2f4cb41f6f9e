from smartbudget.utils import budget_alerts


def seed_exceeded_budget(db, user_id="user-1"):
    db.put("budgets", {
        "budget_id": "budget-1",
        "user_id": user_id,
        "category_id": "default-02",
        "amount": 100,
        "alert_threshold": 80,
        "created_at": "2025-11-01T00:00:00",
    })
    transaction = {
        "transaction_id": "txn-1",
        "user_id": user_id,
        "category_id": "default-02",
        "amount": 150,
        "is_income": False,
        "date": "2025-11-12",
    }
    db.put("transactions", transaction)
    return transaction


def test_alerts_without_a_stored_user_skip_email(fake_db, sent_emails):
    transaction = seed_exceeded_budget(fake_db)

    alerts = budget_alerts.check_transaction_alerts(transaction)

    assert [(a.category_id, a.is_exceeded) for a in alerts] == [("default-02", True)]
    assert sent_emails == []


def test_alerts_for_user_without_email_skip_email(fake_db, sent_emails):
    transaction = seed_exceeded_budget(fake_db)

    alerts = budget_alerts.check_transaction_alerts(transaction, user={"user_id": "user-1", "email": ""})

    assert len(alerts) == 1
    assert sent_emails == []


def test_alerts_email_the_given_user(fake_db, sent_emails):
    transaction = seed_exceeded_budget(fake_db)

    alerts = budget_alerts.check_transaction_alerts(
        transaction, user={"user_id": "user-1", "email": "alice@example.com", "full_name": "Alice"}
    )

    assert len(alerts) == 1
    assert [email["to"] for email in sent_emails] == ["alice@example.com"]
    assert "Hello Alice," in sent_emails[0]["text"]
