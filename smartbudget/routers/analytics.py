from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query

from smartbudget.db import dynamo
from smartbudget.routers.auth import get_current_user_id
from smartbudget.utils.analyzer import BudgetAnalyzer

router = APIRouter()
analyzer = BudgetAnalyzer()


@router.get("/monthly-summary")
def monthly_summary(
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    """Income, expenses, savings and per-category spend for one month (default: current)."""
    now = datetime.utcnow()
    return analyzer.monthly_summary(
        dynamo.get_transactions_by_user_id(user_id),
        dynamo.get_categories_by_user_id(user_id),
        year or now.year,
        month or now.month,
    )


@router.get("/yearly-summary")
def yearly_summary(
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    return analyzer.yearly_summary(dynamo.get_transactions_by_user_id(user_id), year or datetime.utcnow().year)
