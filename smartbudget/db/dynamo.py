import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from smartbudget.core.categories import DEFAULT_CATEGORY_CONFIG
from smartbudget.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Table alias -> partition key. Every table except users has a
# "user_id-index" GSI; users has an "email-index" GSI.
TABLE_KEYS = {
    "users": "user_id",
    "categories": "category_id",
    "accounts": "account_id",
    "transactions": "transaction_id",
    "budgets": "budget_id",
    "bills": "bill_id",
    "goals": "goal_id",
    "insights": "insight_id",
}

tables = {
    alias: dynamodb.Table(f"{settings.DYNAMO_TABLE_PREFIX}-{alias}")
    for alias in TABLE_KEYS
}

USER_INDEX = "user_id-index"
EMAIL_INDEX = "email-index"


# ---------------------------------------------------------------------------
# Table primitives. Everything below goes through these six functions.
# ---------------------------------------------------------------------------

def _put(alias: str, item: dict) -> bool:
    try:
        tables[alias].put_item(Item=_convert_for_dynamo(item))
        return True
    except ClientError as e:
        logger.error(f"put into {alias} failed: {e.response['Error']['Message']}")
        return False


def _get(alias: str, item_id: str) -> Optional[dict]:
    try:
        response = tables[alias].get_item(Key={TABLE_KEYS[alias]: item_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get from {alias} failed: {e.response['Error']['Message']}")
        return None


def _query_index(alias: str, index_name: str, key_name: str, value: str) -> List[dict]:
    try:
        items: List[dict] = []
        kwargs = {
            "IndexName": index_name,
            "KeyConditionExpression": Key(key_name).eq(value),
        }
        while True:
            response = tables[alias].query(**kwargs)
            items.extend(response["Items"])
            if "LastEvaluatedKey" not in response:
                break
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        return [_from_dynamo(item) for item in items]
    except ClientError as e:
        logger.error(f"query on {alias}.{index_name} failed: {e.response['Error']['Message']}")
        return []


def _scan(alias: str) -> List[dict]:
    try:
        items: List[dict] = []
        kwargs: Dict[str, Any] = {}
        while True:
            response = tables[alias].scan(**kwargs)
            items.extend(response["Items"])
            if "LastEvaluatedKey" not in response:
                break
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        return [_from_dynamo(item) for item in items]
    except ClientError as e:
        logger.error(f"scan on {alias} failed: {e.response['Error']['Message']}")
        return []


def _update(alias: str, item_id: str, updates: dict) -> Optional[dict]:
    """
    Apply partial updates to an item. Returns the updated item or None.
    """
    if not updates:
        return None

    update_expression_parts = []
    expression_attribute_values = {}
    expression_attribute_names = {}

    for idx, (key, value) in enumerate(updates.items()):
        placeholder = f"#f{idx}"
        value_placeholder = f":v{idx}"
        update_expression_parts.append(f"{placeholder} = {value_placeholder}")
        expression_attribute_names[placeholder] = key
        expression_attribute_values[value_placeholder] = value

    update_expression = "SET " + ", ".join(update_expression_parts)

    try:
        response = tables[alias].update_item(
            Key={TABLE_KEYS[alias]: item_id},
            UpdateExpression=update_expression,
            ExpressionAttributeNames=expression_attribute_names,
            ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
            ConditionExpression=f"attribute_exists({TABLE_KEYS[alias]})",
            ReturnValues="ALL_NEW",
        )
        attributes = response.get("Attributes")
        return _from_dynamo(attributes) if attributes else None
    except ClientError as e:
        logger.error(f"update on {alias} failed: {e.response['Error']['Message']}")
        return None


def _delete(alias: str, item_id: str) -> bool:
    try:
        response = tables[alias].delete_item(
            Key={TABLE_KEYS[alias]: item_id},
            ReturnValues="ALL_OLD",
        )
        return "Attributes" in response
    except ClientError as e:
        logger.error(f"delete from {alias} failed: {e.response['Error']['Message']}")
        return False


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal and dates to ISO strings for DynamoDB.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj


def _newest_first(items: List[dict], field: str) -> List[dict]:
    return sorted(items, key=lambda item: str(item.get(field) or ""), reverse=True)


def _touch(updates: dict) -> dict:
    return {**updates, "updated_at": datetime.utcnow().isoformat()}


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def get_user_by_email(email: str) -> Optional[dict]:
    """Query the Users table by email via the email GSI."""
    items = _query_index("users", EMAIL_INDEX, "email", email)
    return items[0] if items else None


def get_user_by_id(user_id: str) -> Optional[dict]:
    return _get("users", user_id)


def put_user(user_item: dict) -> bool:
    return _put("users", user_item)


def get_all_users() -> List[dict]:
    return _scan("users")


# ---------------------------------------------------------------------------
# Categories (user-owned; defaults come from core.categories)
# ---------------------------------------------------------------------------

def put_category(item: dict) -> bool:
    return _put("categories", item)


def get_category(category_id: str) -> Optional[dict]:
    return _get("categories", category_id)


def get_categories_by_user_id(user_id: str, include_defaults: bool = True) -> List[dict]:
    """The user's own categories, preceded by the global defaults."""
    own = sorted(_query_index("categories", USER_INDEX, "user_id", user_id), key=lambda c: c.get("name", ""))
    if not include_defaults:
        return own
    return [category.to_dict() for category in DEFAULT_CATEGORY_CONFIG.categories] + own


def update_category(category_id: str, updates: dict) -> Optional[dict]:
    return _update("categories", category_id, _touch(updates))


def delete_category(category_id: str) -> bool:
    return _delete("categories", category_id)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def put_account(item: dict) -> bool:
    return _put("accounts", item)


def get_account(account_id: str) -> Optional[dict]:
    return _get("accounts", account_id)


def get_accounts_by_user_id(user_id: str) -> List[dict]:
    return _query_index("accounts", USER_INDEX, "user_id", user_id)


def update_account(account_id: str, updates: dict) -> Optional[dict]:
    return _update("accounts", account_id, _touch(updates))


def delete_account(account_id: str) -> bool:
    return _delete("accounts", account_id)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def put_transaction(item: dict) -> bool:
    return _put("transactions", item)


def get_transaction(transaction_id: str) -> Optional[dict]:
    return _get("transactions", transaction_id)


def get_transactions_by_user_id(user_id: str, limit: Optional[int] = None) -> List[dict]:
    """All of a user's transactions, newest first."""
    items = _newest_first(_query_index("transactions", USER_INDEX, "user_id", user_id), "date")
    return items[:limit] if limit else items


def get_transactions_by_date_range(user_id: str, start: date, end: date) -> List[dict]:
    """Transactions whose date falls in [start, end], newest first."""
    start_iso, end_iso = start.isoformat(), end.isoformat()
    return [
        item for item in get_transactions_by_user_id(user_id)
        if start_iso <= str(item.get("date", ""))[:10] <= end_iso
    ]


def update_transaction(transaction_id: str, updates: dict) -> Optional[dict]:
    return _update("transactions", transaction_id, _touch(updates))


def delete_transaction(transaction_id: str) -> bool:
    return _delete("transactions", transaction_id)


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------

def put_budget(item: dict) -> bool:
    return _put("budgets", item)


def get_budget(budget_id: str) -> Optional[dict]:
    return _get("budgets", budget_id)


def get_budgets_by_user_id(user_id: str) -> List[dict]:
    return sorted(_query_index("budgets", USER_INDEX, "user_id", user_id), key=lambda b: b.get("created_at", ""))


def update_budget(budget_id: str, updates: dict) -> Optional[dict]:
    return _update("budgets", budget_id, _touch(updates))


def delete_budget(budget_id: str) -> bool:
    return _delete("budgets", budget_id)


# ---------------------------------------------------------------------------
# Bills
# ---------------------------------------------------------------------------

def put_bill(item: dict) -> bool:
    return _put("bills", item)


def get_bill(bill_id: str) -> Optional[dict]:
    return _get("bills", bill_id)


def get_bills_by_user_id(user_id: str) -> List[dict]:
    return sorted(_query_index("bills", USER_INDEX, "user_id", user_id), key=lambda b: b.get("due_date", ""))


def get_upcoming_bills(user_id: str, days: int, today: Optional[date] = None) -> List[dict]:
    """Unpaid bills due between today and today + days (inclusive), soonest first."""
    today = today or datetime.utcnow().date()
    start_iso = today.isoformat()
    end_iso = (today + timedelta(days=days)).isoformat()
    return [
        bill for bill in get_bills_by_user_id(user_id)
        if not bill.get("is_paid") and start_iso <= str(bill.get("due_date", ""))[:10] <= end_iso
    ]


def update_bill(bill_id: str, updates: dict) -> Optional[dict]:
    return _update("bills", bill_id, _touch(updates))


def delete_bill(bill_id: str) -> bool:
    return _delete("bills", bill_id)


# ---------------------------------------------------------------------------
# Financial goals
# ---------------------------------------------------------------------------

def put_goal(item: dict) -> bool:
    return _put("goals", item)


def get_goal(goal_id: str) -> Optional[dict]:
    return _get("goals", goal_id)


def get_goals_by_user_id(user_id: str) -> List[dict]:
    return sorted(_query_index("goals", USER_INDEX, "user_id", user_id), key=lambda g: g.get("target_date", ""))


def update_goal(goal_id: str, updates: dict) -> Optional[dict]:
    return _update("goals", goal_id, _touch(updates))


def delete_goal(goal_id: str) -> bool:
    return _delete("goals", goal_id)


# ---------------------------------------------------------------------------
# AI insights
# ---------------------------------------------------------------------------

def put_insight(item: dict) -> bool:
    return _put("insights", item)


def get_insight(insight_id: str) -> Optional[dict]:
    return _get("insights", insight_id)


def get_insights_by_user_id(user_id: str, limit: Optional[int] = None) -> List[dict]:
    items = _newest_first(_query_index("insights", USER_INDEX, "user_id", user_id), "created_at")
    return items[:limit] if limit else items


def get_unread_insights(user_id: str) -> List[dict]:
    return [item for item in get_insights_by_user_id(user_id) if not item.get("is_read")]


def mark_insight_as_read(insight_id: str) -> Optional[dict]:
    return _update("insights", insight_id, _touch({"is_read": True}))
