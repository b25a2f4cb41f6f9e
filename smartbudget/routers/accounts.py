from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from smartbudget.db import dynamo
from smartbudget.models.account import AccountCreate, AccountInDB, AccountUpdate
from smartbudget.routers.auth import get_current_user_id, require_owner

router = APIRouter()


@router.get("/")
def list_accounts(user_id: str = Depends(get_current_user_id)) -> List[Dict]:
    return dynamo.get_accounts_by_user_id(user_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_account(account: AccountCreate, user_id: str = Depends(get_current_user_id)) -> Dict:
    item = AccountInDB(user_id=user_id, **account.model_dump()).model_dump(mode="json")
    if not dynamo.put_account(item):
        raise HTTPException(status_code=500, detail="Failed to save account")
    return item


@router.get("/{account_id}")
def get_account(account_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    return require_owner(dynamo.get_account(account_id), user_id, "Account")


@router.patch("/{account_id}")
def update_account(
    account_id: str,
    account_update: AccountUpdate,
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    require_owner(dynamo.get_account(account_id), user_id, "Account")

    updates = account_update.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = dynamo.update_account(account_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Account not found")
    return updated


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: str, user_id: str = Depends(get_current_user_id)):
    require_owner(dynamo.get_account(account_id), user_id, "Account")
    if not dynamo.delete_account(account_id):
        raise HTTPException(status_code=500, detail="Failed to delete account")
    return None
