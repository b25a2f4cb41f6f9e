from datetime import date

import pytest

from smartbudget.utils.analyzer import UNCATEGORIZED, BudgetAnalyzer, percent_of

sample_transactions = [
    {"transaction_id": "t1", "category_id": "food", "amount": 250.0, "is_income": False, "date": "2025-11-01"},
    {"transaction_id": "t2", "category_id": "rent", "amount": 1000.0, "is_income": False, "date": "2025-11-02"},
    {"transaction_id": "t3", "category_id": "food", "amount": 150.0, "is_income": False, "date": "2025-11-03"},
    {"transaction_id": "t4", "category_id": None, "amount": 40.5, "is_income": False, "date": "2025-11-04"},
    {"transaction_id": "t5", "category_id": "salary", "amount": 3000.0, "is_income": True, "date": "2025-11-05"},
    {"transaction_id": "t6", "category_id": "food", "amount": 12.25, "is_income": False, "date": "2025-12-01"},
]

categories = [
    {"category_id": "food", "name": "Food & Dining"},
    {"category_id": "rent", "name": "Housing"},
    {"category_id": "salary", "name": "Income"},
]


def budget(category_id="food", amount=100.0, threshold=80):
    return {"category_id": category_id, "amount": amount, "alert_threshold": threshold}


def spend(category_id, amount, txn_id="s1"):
    return {"transaction_id": txn_id, "category_id": category_id, "amount": amount, "is_income": False, "date": "2025-11-10"}


def test_category_spending_ignores_income_and_uncategorized():
    analyzer = BudgetAnalyzer()
    assert analyzer.category_spending(sample_transactions) == {"food": 412.25, "rent": 1000.0}


def test_spending_plus_ignored_equals_total():
    analyzer = BudgetAnalyzer()
    total = sum(t["amount"] for t in sample_transactions)
    spent = sum(analyzer.category_spending(sample_transactions).values())
    assert spent + analyzer.ignored_total(sample_transactions) == pytest.approx(total)


def test_duplicate_transaction_is_counted_once():
    analyzer = BudgetAnalyzer()
    doubled = sample_transactions + [dict(sample_transactions[0])]
    assert analyzer.category_spending(doubled) == analyzer.category_spending(sample_transactions)


def test_category_spending_is_repeatable():
    analyzer = BudgetAnalyzer()
    assert analyzer.category_spending(sample_transactions) == analyzer.category_spending(sample_transactions)


def test_category_spending_date_range_is_inclusive():
    analyzer = BudgetAnalyzer()
    result = analyzer.category_spending(sample_transactions, start=date(2025, 11, 2), end=date(2025, 11, 3))
    assert result == {"rent": 1000.0, "food": 150.0}


def test_expense_breakdown_tracks_uncategorized_under_sentinel():
    analyzer = BudgetAnalyzer()
    breakdown = analyzer.expense_breakdown(sample_transactions)
    assert breakdown[UNCATEGORIZED] == 40.5
    assert "salary" not in breakdown


@pytest.mark.parametrize(
    "spent, expected",
    [
        (79, None),
        (80, (80, False)),
        (100, (100, False)),
        (101, (101, True)),
    ],
)
def test_alert_threshold_boundaries(spent, expected):
    analyzer = BudgetAnalyzer()
    alerts = analyzer.evaluate_budget_alerts([budget()], [spend("food", spent)], categories)
    if expected is None:
        assert alerts == []
    else:
        assert len(alerts) == 1
        assert (alerts[0].percent_spent, alerts[0].is_exceeded) == expected
        assert alerts[0].spent == spent
        assert alerts[0].category_name == "Food & Dining"


def test_zero_amount_budget_does_not_divide_by_zero():
    analyzer = BudgetAnalyzer()
    alerts = analyzer.evaluate_budget_alerts([budget(amount=0)], [spend("food", 5)], categories)
    assert len(alerts) == 1
    assert alerts[0].is_exceeded is True
    assert alerts[0].percent_spent == 0


def test_zero_amount_budget_without_spend_has_no_alert():
    analyzer = BudgetAnalyzer()
    assert analyzer.evaluate_budget_alerts([budget(amount=0, threshold=0)], [], categories) == []


def test_budget_for_deleted_category_is_skipped():
    analyzer = BudgetAnalyzer()
    alerts = analyzer.evaluate_budget_alerts([budget(category_id="gone")], [spend("gone", 500)], categories)
    assert alerts == []


def test_alerts_follow_budget_order():
    analyzer = BudgetAnalyzer()
    budgets = [budget("rent", 900), budget("food", 300)]
    alerts = analyzer.evaluate_budget_alerts(budgets, sample_transactions, categories)
    assert [a.category_id for a in alerts] == ["rent", "food"]

    alerts = analyzer.evaluate_budget_alerts(list(reversed(budgets)), sample_transactions, categories)
    assert [a.category_id for a in alerts] == ["food", "rent"]


def test_category_filter_limits_alerts():
    analyzer = BudgetAnalyzer()
    budgets = [budget("rent", 900), budget("food", 300)]
    alerts = analyzer.evaluate_budget_alerts(budgets, sample_transactions, categories, category_id="food")
    assert [a.category_id for a in alerts] == ["food"]


def test_percent_rounds_half_up():
    assert percent_of(80.5, 100) == 81
    assert percent_of(1, 3) == 33
    assert percent_of(5, 0) == 0


def test_monthly_summary():
    analyzer = BudgetAnalyzer()
    summary = analyzer.monthly_summary(sample_transactions, categories, 2025, 11)
    assert summary["income"] == 3000.0
    assert summary["expenses"] == 1440.5
    assert summary["savings"] == 1559.5
    names = {c["category_id"]: c["category_name"] for c in summary["categorized_expenses"]}
    assert names == {"rent": "Housing", "food": "Food & Dining", UNCATEGORIZED: "Uncategorized"}
    assert summary["categorized_expenses"][0]["category_id"] == "rent"


def test_yearly_summary():
    analyzer = BudgetAnalyzer()
    summary = analyzer.yearly_summary(sample_transactions, 2025)
    assert len(summary["monthly_breakdown"]) == 12
    assert summary["monthly_breakdown"][10] == {"month": 11, "income": 3000.0, "expenses": 1440.5}
    assert summary["monthly_breakdown"][11] == {"month": 12, "income": 0.0, "expenses": 12.25}
    assert summary["expenses"] == 1452.75


def test_financial_summary():
    analyzer = BudgetAnalyzer()
    goals = [{"name": "Emergency fund", "target_amount": 5000, "current_amount": 1200}]
    summary = analyzer.financial_summary(sample_transactions, categories, goals)
    assert summary["income"] == 3000.0
    assert summary["expenses"] == {"Food & Dining": 412.25, "Housing": 1000.0, "Uncategorized": 40.5}
    assert summary["savings"] == 1547.25
    assert summary["goals"] == [{"name": "Emergency fund", "target_amount": 5000, "current_amount": 1200}]
