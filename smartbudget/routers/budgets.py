from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from smartbudget.db import dynamo
from smartbudget.models.budget import BudgetCreate, BudgetInDB, BudgetUpdate
from smartbudget.routers.auth import get_current_user_id, require_owner
from smartbudget.utils.analyzer import BudgetAnalyzer

router = APIRouter()
analyzer = BudgetAnalyzer()


def _check_category(user_id: str, category_id: str) -> None:
    visible = {c["category_id"] for c in dynamo.get_categories_by_user_id(user_id)}
    if category_id not in visible:
        raise HTTPException(status_code=400, detail="Unknown category_id")


@router.get("/")
def list_budgets(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    return dynamo.get_budgets_by_user_id(user_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_budget(budget: BudgetCreate, user_id: str = Depends(get_current_user_id)) -> Dict:
    _check_category(user_id, budget.category_id)
    item = BudgetInDB(user_id=user_id, **budget.model_dump()).model_dump(mode="json")
    if not dynamo.put_budget(item):
        raise HTTPException(status_code=500, detail="Failed to save budget")
    return item


@router.get("/spending")
def budget_spending(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    """Total non-income spend per category across all of the user's transactions."""
    spending = analyzer.category_spending(dynamo.get_transactions_by_user_id(user_id))
    return [{"category_id": category_id, "spent": spent} for category_id, spent in spending.items()]


@router.get("/alerts")
def budget_alerts(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    """Budgets that are exceeded or past their alert threshold."""
    alerts = analyzer.evaluate_budget_alerts(
        dynamo.get_budgets_by_user_id(user_id),
        dynamo.get_transactions_by_user_id(user_id),
        dynamo.get_categories_by_user_id(user_id),
    )
    return [alert.to_dict() for alert in alerts]


@router.get("/{budget_id}")
def get_budget(budget_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    return require_owner(dynamo.get_budget(budget_id), user_id, "Budget")


@router.patch("/{budget_id}")
def update_budget(
    budget_id: str,
    budget_update: BudgetUpdate,
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    budget = require_owner(dynamo.get_budget(budget_id), user_id, "Budget")

    updates = budget_update.model_dump(exclude_unset=True, mode="json")
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "category_id" in updates:
        _check_category(user_id, updates["category_id"])
    start = updates.get("start_date", budget.get("start_date"))
    end = updates.get("end_date", budget.get("end_date"))
    if start and end and str(end) < str(start):
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    updated = dynamo.update_budget(budget_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Budget not found")
    return updated


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(budget_id: str, user_id: str = Depends(get_current_user_id)):
    require_owner(dynamo.get_budget(budget_id), user_id, "Budget")
    if not dynamo.delete_budget(budget_id):
        raise HTTPException(status_code=500, detail="Failed to delete budget")
    return None
