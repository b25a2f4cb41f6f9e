"""
Bill Reminders Router
Endpoints that run bill reminder checks on demand. There is no in-process
scheduler: an external job calls the admin endpoint (e.g. daily).
"""
import hmac
import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from smartbudget.core.config import settings
from smartbudget.models.insight import AdminReminderRequest
from smartbudget.routers.auth import get_current_user_id
from smartbudget.utils.reminders import check_bill_reminders, send_all_bill_reminders

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/bill-reminders/check")
def check_my_bill_reminders(user_id: str = Depends(get_current_user_id)) -> Dict:
    result = check_bill_reminders(user_id)
    return {"success": True, "message": "Bill reminders check completed", **result}


@router.post("/admin/bill-reminders/check")
def check_all_bill_reminders(request: AdminReminderRequest) -> Dict:
    if not settings.ADMIN_API_KEY or not hmac.compare_digest(request.api_key, settings.ADMIN_API_KEY):
        logger.warning("Rejected admin bill reminder trigger with invalid API key")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")

    summary = send_all_bill_reminders()
    return {"success": True, "message": "Bill reminders check triggered successfully", **summary}
