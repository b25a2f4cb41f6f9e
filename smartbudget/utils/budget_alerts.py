"""
Budget alert checks run right after a transaction is created.
"""
import logging
from typing import Dict, List, Optional

from smartbudget.db import dynamo
from smartbudget.utils.analyzer import BudgetAlert, BudgetAnalyzer
from smartbudget.utils.email_service import send_budget_alert_email

logger = logging.getLogger(__name__)

analyzer = BudgetAnalyzer()


def check_transaction_alerts(transaction: Dict, user: Optional[Dict] = None) -> List[BudgetAlert]:
    """
    Evaluate the budget for the transaction's category and email the owner
    once per alert. Income and uncategorized transactions never alert.
    Email delivery is best-effort; failures are logged by the email service.
    """
    if transaction.get("is_income") or not transaction.get("category_id"):
        return []

    user_id = transaction["user_id"]
    category_id = transaction["category_id"]

    budgets = dynamo.get_budgets_by_user_id(user_id)
    if not any(b.get("category_id") == category_id for b in budgets):
        return []

    transactions = dynamo.get_transactions_by_user_id(user_id)
    categories = dynamo.get_categories_by_user_id(user_id)

    alerts = analyzer.evaluate_budget_alerts(budgets, transactions, categories, category_id=category_id)
    logger.info(f"Budget check for user {user_id}, category {category_id}: {len(alerts)} alert(s)")

    if not alerts:
        return alerts

    if user is None:
        user = dynamo.get_user_by_id(user_id)
    if not user or not user.get("email"):
        logger.warning(f"User {user_id} has no email address; skipping budget alert emails")
        return alerts

    email = user["email"]
    for alert in alerts:
        sent = send_budget_alert_email(email, alert, user_name=user.get("full_name"))
        if not sent:
            logger.warning(f"Budget alert email for {alert.category_name} to {email} was not delivered")
    return alerts
