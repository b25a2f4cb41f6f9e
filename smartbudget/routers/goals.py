from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from smartbudget.db import dynamo
from smartbudget.models.goal import GoalCreate, GoalInDB, GoalUpdate
from smartbudget.routers.auth import get_current_user_id, require_owner

router = APIRouter()


def _with_progress(goal: Dict) -> Dict:
    target = float(goal.get("target_amount") or 0)
    current = float(goal.get("current_amount") or 0)
    progress = round(100 * current / target, 1) if target else 0.0
    return {**goal, "progress_percent": progress}


@router.get("/")
def list_goals(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    return [_with_progress(goal) for goal in dynamo.get_goals_by_user_id(user_id)]


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_goal(goal: GoalCreate, user_id: str = Depends(get_current_user_id)) -> Dict:
    item = GoalInDB(user_id=user_id, **goal.model_dump()).model_dump(mode="json")
    if not dynamo.put_goal(item):
        raise HTTPException(status_code=500, detail="Failed to save goal")
    return _with_progress(item)


@router.get("/{goal_id}")
def get_goal(goal_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    return _with_progress(require_owner(dynamo.get_goal(goal_id), user_id, "Goal"))


@router.patch("/{goal_id}")
def update_goal(goal_id: str, goal_update: GoalUpdate, user_id: str = Depends(get_current_user_id)) -> Dict:
    require_owner(dynamo.get_goal(goal_id), user_id, "Goal")

    updates = goal_update.model_dump(exclude_unset=True, mode="json")
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_goal(goal_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Goal not found")
    return _with_progress(updated)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, user_id: str = Depends(get_current_user_id)):
    require_owner(dynamo.get_goal(goal_id), user_id, "Goal")
    if not dynamo.delete_goal(goal_id):
        raise HTTPException(status_code=500, detail="Failed to delete goal")
    return None
