from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, asdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Iterator, List, Optional

# Reserved key for expenses without a category in per-category maps.
UNCATEGORIZED = "uncategorized"


@dataclass
class BudgetAlert:
    """A budget that has crossed its alert threshold or been exceeded."""

    category_id: str
    category_name: str
    amount: float
    spent: float
    percent_spent: int
    is_exceeded: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def percent_of(spent: float, amount: float) -> int:
    """Whole percentage of amount that has been spent, rounded half up."""
    if amount == 0:
        return 0
    value = Decimal(str(spent)) * 100 / Decimal(str(amount))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class BudgetAnalyzer:
    """
    Aggregation helpers over one user's transactions and budgets.

    Transactions, budgets and categories are plain dicts as returned by the
    persistence layer, so the same instance serves routers and reminder runs.
    """

    def _unique(self, transactions: Iterable[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
        seen = set()
        for txn in transactions:
            txn_id = txn.get("transaction_id")
            if txn_id is not None:
                if txn_id in seen:
                    continue
                seen.add(txn_id)
            yield txn

    def _in_range(
        self,
        transactions: Iterable[Dict[str, Any]],
        start: Optional[date],
        end: Optional[date],
    ) -> Iterator[Dict[str, Any]]:
        for txn in self._unique(transactions):
            txn_date = _as_date(txn.get("date"))
            if start and (txn_date is None or txn_date < start):
                continue
            if end and (txn_date is None or txn_date > end):
                continue
            yield txn

    def category_spending(
        self,
        transactions: Iterable[Dict[str, Any]],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, float]:
        """Sum of expense amounts per category_id; income and uncategorized are ignored."""
        totals: Dict[str, float] = defaultdict(float)
        for txn in self._in_range(transactions, start, end):
            if txn.get("is_income") or not txn.get("category_id"):
                continue
            totals[txn["category_id"]] += float(txn.get("amount", 0))
        return {cat: round(total, 2) for cat, total in totals.items()}

    def expense_breakdown(
        self,
        transactions: Iterable[Dict[str, Any]],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, float]:
        """Like category_spending, with uncategorized expenses under UNCATEGORIZED."""
        totals: Dict[str, float] = defaultdict(float)
        for txn in self._in_range(transactions, start, end):
            if txn.get("is_income"):
                continue
            totals[txn.get("category_id") or UNCATEGORIZED] += float(txn.get("amount", 0))
        return {cat: round(total, 2) for cat, total in totals.items()}

    def ignored_total(
        self,
        transactions: Iterable[Dict[str, Any]],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> float:
        """Amount left out of category_spending: income plus uncategorized expenses."""
        return round(
            sum(
                float(txn.get("amount", 0))
                for txn in self._in_range(transactions, start, end)
                if txn.get("is_income") or not txn.get("category_id")
            ),
            2,
        )

    def evaluate_budget_alerts(
        self,
        budgets: List[Dict[str, Any]],
        transactions: List[Dict[str, Any]],
        categories: List[Dict[str, Any]],
        category_id: Optional[str] = None,
    ) -> List[BudgetAlert]:
        """
        Compare spend per category against each budget.

        Alerts come back in budget order. Budgets whose category no longer
        exists are skipped; a zero-amount budget is exceeded by any spend.
        """
        category_names = {c["category_id"]: c.get("name", "") for c in categories}
        spending = self.category_spending(transactions)

        alerts: List[BudgetAlert] = []
        for budget in budgets:
            budget_category = budget.get("category_id")
            if not budget_category or budget_category not in category_names:
                continue
            if category_id is not None and budget_category != category_id:
                continue

            amount = float(budget.get("amount", 0))
            threshold = budget.get("alert_threshold", 80)
            spent = spending.get(budget_category, 0.0)
            percent_spent = percent_of(spent, amount)

            is_exceeded = spent > amount
            is_approaching = amount > 0 and percent_spent >= threshold and not is_exceeded

            if is_exceeded or is_approaching:
                alerts.append(
                    BudgetAlert(
                        category_id=budget_category,
                        category_name=category_names[budget_category],
                        amount=amount,
                        spent=spent,
                        percent_spent=percent_spent,
                        is_exceeded=is_exceeded,
                    )
                )
        return alerts

    def monthly_summary(
        self,
        transactions: List[Dict[str, Any]],
        categories: List[Dict[str, Any]],
        year: int,
        month: int,
    ) -> Dict[str, Any]:
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        monthly = [
            txn for txn in self._in_range(transactions, start, None)
            if _as_date(txn.get("date")) < end
        ]

        income = round(sum(float(t.get("amount", 0)) for t in monthly if t.get("is_income")), 2)
        expenses = round(sum(float(t.get("amount", 0)) for t in monthly if not t.get("is_income")), 2)

        names = {c["category_id"]: c.get("name", "") for c in categories}
        breakdown = self.expense_breakdown(monthly)
        categorized = [
            {
                "category_id": cat,
                "category_name": "Uncategorized" if cat == UNCATEGORIZED else names.get(cat, f"Category {cat}"),
                "amount": amount,
            }
            for cat, amount in sorted(breakdown.items(), key=lambda item: item[1], reverse=True)
        ]

        return {
            "year": year,
            "month": month,
            "income": income,
            "expenses": expenses,
            "savings": round(income - expenses, 2),
            "categorized_expenses": categorized,
        }

    def yearly_summary(self, transactions: List[Dict[str, Any]], year: int) -> Dict[str, Any]:
        months = {m: {"month": m, "income": 0.0, "expenses": 0.0} for m in range(1, 13)}
        for txn in self._in_range(transactions, date(year, 1, 1), date(year, 12, 31)):
            bucket = months[_as_date(txn["date"]).month]
            key = "income" if txn.get("is_income") else "expenses"
            bucket[key] += float(txn.get("amount", 0))

        breakdown = [
            {"month": m["month"], "income": round(m["income"], 2), "expenses": round(m["expenses"], 2)}
            for m in months.values()
        ]
        income = round(sum(m["income"] for m in breakdown), 2)
        expenses = round(sum(m["expenses"] for m in breakdown), 2)
        return {
            "year": year,
            "income": income,
            "expenses": expenses,
            "savings": round(income - expenses, 2),
            "monthly_breakdown": breakdown,
        }

    def financial_summary(
        self,
        transactions: List[Dict[str, Any]],
        categories: List[Dict[str, Any]],
        goals: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Income, expenses by category name, savings and goals, as sent to the AI advisor."""
        names = {c["category_id"]: c.get("name", "") for c in categories}
        income = 0.0
        expenses: Dict[str, float] = defaultdict(float)
        for txn in self._unique(transactions):
            amount = float(txn.get("amount", 0))
            if txn.get("is_income"):
                income += amount
                continue
            category = txn.get("category_id")
            if category:
                expenses[names.get(category, f"Category {category}")] += amount
            else:
                expenses["Uncategorized"] += amount

        total_expenses = sum(expenses.values())
        return {
            "income": round(income, 2),
            "expenses": {name: round(amount, 2) for name, amount in expenses.items()},
            "savings": round(income - total_expenses, 2),
            "goals": [
                {
                    "name": g.get("name"),
                    "target_amount": g.get("target_amount"),
                    "current_amount": g.get("current_amount", 0),
                }
                for g in goals
            ],
        }

    def category_history(
        self,
        transactions: List[Dict[str, Any]],
        categories: List[Dict[str, Any]],
    ) -> Dict[str, List[float]]:
        """Expense amounts per category name, in input order, for expense prediction."""
        names = {c["category_id"]: c.get("name", "") for c in categories}
        history: Dict[str, List[float]] = defaultdict(list)
        for txn in self._unique(transactions):
            category = txn.get("category_id")
            if txn.get("is_income") or not category:
                continue
            history[names.get(category, f"Category {category}")].append(float(txn.get("amount", 0)))
        return dict(history)
