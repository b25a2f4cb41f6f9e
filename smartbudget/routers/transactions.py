import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from smartbudget.db import dynamo
from smartbudget.models.transaction import TransactionCreate, TransactionInDB, TransactionUpdate
from smartbudget.routers.auth import get_current_user_id, require_owner
from smartbudget.utils import receipts
from smartbudget.utils.budget_alerts import check_transaction_alerts

router = APIRouter()
logger = logging.getLogger(__name__)


def _validate_references(user_id: str, category_id: Optional[str], account_id: Optional[str]) -> None:
    if category_id:
        visible = {c["category_id"] for c in dynamo.get_categories_by_user_id(user_id)}
        if category_id not in visible:
            raise HTTPException(status_code=400, detail="Unknown category_id")
    if account_id:
        account = dynamo.get_account(account_id)
        if not account or account.get("user_id") != user_id:
            raise HTTPException(status_code=400, detail="Unknown account_id")


@router.get("/")
def list_transactions(
    limit: Optional[int] = Query(default=None, ge=1),
    user_id: str = Depends(get_current_user_id),
) -> List[Dict]:
    return dynamo.get_transactions_by_user_id(user_id, limit)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, user_id: str = Depends(get_current_user_id)) -> Dict:
    """
    Create a transaction. If it is a categorized expense, the budget for its
    category is checked and any alerts are returned alongside it.
    """
    _validate_references(user_id, transaction.category_id, transaction.account_id)

    item = TransactionInDB(user_id=user_id, **transaction.model_dump()).model_dump(mode="json")
    if not dynamo.put_transaction(item):
        raise HTTPException(status_code=500, detail="Failed to save transaction")

    alerts = []
    try:
        alerts = check_transaction_alerts(item)
    except Exception as e:
        logger.error(f"Error checking budget alerts: {str(e)}", exc_info=True)

    return {"transaction": item, "alerts": [alert.to_dict() for alert in alerts]}


@router.get("/by-date")
def list_transactions_by_date(
    start_date: date,
    end_date: date,
    user_id: str = Depends(get_current_user_id),
) -> List[Dict]:
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    return dynamo.get_transactions_by_date_range(user_id, start_date, end_date)


@router.get("/{transaction_id}")
def get_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)) -> Dict:
    return require_owner(dynamo.get_transaction(transaction_id), user_id, "Transaction")


@router.patch("/{transaction_id}")
def update_transaction(
    transaction_id: str,
    transaction_update: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    require_owner(dynamo.get_transaction(transaction_id), user_id, "Transaction")

    updates = transaction_update.model_dump(exclude_unset=True, mode="json")
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    _validate_references(user_id, updates.get("category_id"), updates.get("account_id"))

    updated = dynamo.update_transaction(transaction_id, updates)
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return updated


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    require_owner(dynamo.get_transaction(transaction_id), user_id, "Transaction")
    if not dynamo.delete_transaction(transaction_id):
        raise HTTPException(status_code=500, detail="Failed to delete transaction")
    return None


@router.post("/{transaction_id}/receipt")
async def upload_receipt(
    transaction_id: str,
    receipt_image: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
) -> Dict:
    """Attach a receipt image (JPEG/PNG/WebP/HEIC, up to 5 MB) to a transaction."""
    require_owner(dynamo.get_transaction(transaction_id), user_id, "Transaction")

    if receipt_image.content_type not in receipts.ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Receipt must be a JPEG, PNG, WebP or HEIC image")
    content = await receipt_image.read()
    if not content:
        raise HTTPException(status_code=400, detail="No receipt image uploaded")
    if len(content) > receipts.MAX_RECEIPT_BYTES:
        raise HTTPException(status_code=400, detail="Receipt image is larger than 5 MB")

    url = receipts.upload_receipt(user_id, transaction_id, content, receipt_image.content_type)
    if not url:
        raise HTTPException(status_code=500, detail="Failed to upload receipt")

    updated = dynamo.update_transaction(transaction_id, {"receipt_image_url": url})
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return updated
