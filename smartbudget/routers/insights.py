from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from smartbudget.db import dynamo
from smartbudget.routers.auth import get_current_user_id, require_owner

router = APIRouter()


@router.get("/")
def list_insights(
    limit: Optional[int] = Query(default=None, ge=1),
    user_id: str = Depends(get_current_user_id),
) -> List[Dict]:
    return dynamo.get_insights_by_user_id(user_id, limit)


@router.get("/unread")
def unread_insights(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    return dynamo.get_unread_insights(user_id)


@router.post("/{insight_id}/read")
def mark_insight_read(insight_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    require_owner(dynamo.get_insight(insight_id), user_id, "Insight")
    updated = dynamo.mark_insight_as_read(insight_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Insight not found")
    return updated
