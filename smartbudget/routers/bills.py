from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from smartbudget.db import dynamo
from smartbudget.models.bill import BillCreate, BillInDB, BillUpdate
from smartbudget.routers.auth import get_current_user_id, require_owner

router = APIRouter()


@router.get("/")
def list_bills(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    return dynamo.get_bills_by_user_id(user_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_bill(bill: BillCreate, user_id: str = Depends(get_current_user_id)) -> Dict:
    item = BillInDB(user_id=user_id, **bill.model_dump()).model_dump(mode="json")
    if not dynamo.put_bill(item):
        raise HTTPException(status_code=500, detail="Failed to save bill")
    return item


@router.get("/upcoming")
def upcoming_bills(
    days: int = Query(default=7, ge=0, le=366),
    user_id: str = Depends(get_current_user_id),
) -> List[Dict]:
    """Unpaid bills due within the next `days` days, soonest first."""
    return dynamo.get_upcoming_bills(user_id, days)


@router.get("/{bill_id}")
def get_bill(bill_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    return require_owner(dynamo.get_bill(bill_id), user_id, "Bill")


@router.patch("/{bill_id}")
def update_bill(bill_id: str, bill_update: BillUpdate, user_id: str = Depends(get_current_user_id)) -> Dict:
    require_owner(dynamo.get_bill(bill_id), user_id, "Bill")

    updates = bill_update.model_dump(exclude_unset=True, mode="json")
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_bill(bill_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Bill not found")
    return updated


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bill(bill_id: str, user_id: str = Depends(get_current_user_id)):
    require_owner(dynamo.get_bill(bill_id), user_id, "Bill")
    if not dynamo.delete_bill(bill_id):
        raise HTTPException(status_code=500, detail="Failed to delete bill")
    return None
