"""
Bill Reminders
Matches unpaid bills against their reminder lead-time and emails the owner.

Runs are triggered per user or by an external caller for all users; nothing
is deduplicated, so a bill inside its window is reminded on every run.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from smartbudget.core.config import settings
from smartbudget.db import dynamo
from smartbudget.utils.email_service import send_bill_reminder_email

logger = logging.getLogger(__name__)


@dataclass
class BillReminder:
    bill: Dict[str, Any]
    days_to_due: int

    @property
    def due_date(self) -> date:
        return _as_date(self.bill["due_date"])


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def days_until_due(today: date, due_date: Any) -> int:
    """Whole days from today to the due date; negative when overdue."""
    return (_as_date(due_date) - _as_date(today)).days


def match_due_reminders(bills: List[Dict[str, Any]], today: date) -> List[BillReminder]:
    """Bills whose due date is between today and today + reminder_days."""
    reminders = []
    for bill in bills:
        if bill.get("is_paid"):
            continue
        days_to_due = days_until_due(today, bill["due_date"])
        if 0 <= days_to_due <= int(bill.get("reminder_days", 3)):
            reminders.append(BillReminder(bill=bill, days_to_due=days_to_due))
    return reminders


def check_bill_reminders(user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
    """Send reminder emails for one user's bills that are inside their window."""
    today = today or datetime.utcnow().date()
    result = {"user_id": user_id, "reminders_due": 0, "emails_sent": 0}

    user = dynamo.get_user_by_id(user_id)
    if not user:
        logger.error(f"User not found: {user_id}")
        return result
    if not user.get("email"):
        logger.error(f"User {user_id} has no email address for reminders")
        return result

    bills = dynamo.get_upcoming_bills(user_id, settings.BILL_REMINDER_LOOKAHEAD_DAYS, today=today)
    reminders = match_due_reminders(bills, today)
    result["reminders_due"] = len(reminders)

    for reminder in reminders:
        sent = send_bill_reminder_email(
            to_email=user["email"],
            bill_name=reminder.bill["name"],
            bill_amount=float(reminder.bill.get("amount", 0)),
            due_date=reminder.due_date,
            days_to_due=reminder.days_to_due,
            user_name=user.get("full_name"),
        )
        if sent:
            result["emails_sent"] += 1
            logger.info(f"Bill reminder sent for bill {reminder.bill['name']} to user {user['email']}")
        else:
            logger.warning(f"Bill reminder for {reminder.bill['name']} to {user['email']} was not delivered")
    return result


def send_all_bill_reminders(today: Optional[date] = None) -> Dict[str, Any]:
    """Run check_bill_reminders for every user."""
    users = dynamo.get_all_users()
    logger.info(f"Processing bill reminders for {len(users)} users")

    summary = {"users_processed": 0, "reminders_due": 0, "emails_sent": 0, "errors": 0}
    for user in users:
        try:
            result = check_bill_reminders(user["user_id"], today=today)
        except Exception as e:
            summary["errors"] += 1
            logger.error(f"Error checking bill reminders for user {user.get('user_id')}: {str(e)}", exc_info=True)
            continue
        summary["users_processed"] += 1
        summary["reminders_due"] += result["reminders_due"]
        summary["emails_sent"] += result["emails_sent"]

    logger.info(f"Completed processing bill reminders: {summary}")
    return summary
