"""
AI Service
Thin wrapper around the OpenAI chat completions API for financial advice,
transaction categorization, expense prediction, saving suggestions and
receipt reading.
"""
import base64
import json
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from smartbudget.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[OpenAI] = None


class AIServiceError(Exception):
    """The AI provider could not produce a response."""


class AIQuotaExceededError(AIServiceError):
    """The AI provider rejected the request for quota or rate-limit reasons."""


def _get_client() -> OpenAI:
    global _client
    if _client is None:
        if not settings.OPENAI_API_KEY:
            raise AIServiceError("OPENAI_API_KEY is not configured")
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def _complete(messages: List[Dict[str, Any]], json_response: bool = False) -> str:
    kwargs: Dict[str, Any] = {"model": settings.OPENAI_MODEL, "messages": messages}
    if json_response:
        kwargs["response_format"] = {"type": "json_object"}

    try:
        response = _get_client().chat.completions.create(**kwargs)
    except openai.RateLimitError as e:
        logger.error(f"OpenAI quota/rate limit error: {str(e)}")
        raise AIQuotaExceededError(str(e)) from e
    except openai.OpenAIError as e:
        logger.error(f"OpenAI error: {str(e)}")
        raise AIServiceError(str(e)) from e

    content = response.choices[0].message.content
    if not content:
        raise AIServiceError("Empty response from AI provider")
    return content


def _load_json(raw: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise AIServiceError(f"AI provider returned invalid JSON: {raw!r}") from e
    if not isinstance(data, dict):
        raise AIServiceError(f"AI provider returned unexpected JSON: {raw!r}")
    return data


def generate_financial_advice(
    summary: Dict[str, Any],
    topic: Optional[str] = None,
    question: Optional[str] = None,
) -> str:
    """Personalized advice for a financial summary (income, expenses, savings, goals)."""
    prompt = (
        "You are a personal finance advisor. Based on the user's financial data below, "
        "give concise, practical advice in 3-5 short paragraphs.\n\n"
        f"Financial data:\n{json.dumps(summary, indent=2)}"
    )
    if topic:
        prompt += f"\n\nFocus on: {topic}"
    if question:
        prompt += f"\n\nThe user asks: {question}"

    return _complete([
        {"role": "system", "content": "You are a helpful, cautious personal finance advisor."},
        {"role": "user", "content": prompt},
    ])


def categorize_transaction(description: str, amount: float, category_names: List[str]) -> Dict[str, Any]:
    """Pick the best category name for a transaction. Returns {"category", "confidence"}."""
    prompt = (
        f"Categorize this transaction into exactly one of these categories: {', '.join(category_names)}.\n"
        f"Description: {description}\nAmount: {amount:.2f}\n"
        'Respond with JSON: {"category": "<name>", "confidence": <0..1>}'
    )
    data = _load_json(_complete([{"role": "user", "content": prompt}], json_response=True))

    try:
        return {
            "category": str(data["category"]),
            "confidence": max(0.0, min(1.0, float(data.get("confidence", 0)))),
        }
    except (ValueError, KeyError, TypeError) as e:
        raise AIServiceError(f"Unparseable categorization response: {data!r}") from e


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return round(float(value), 2)
    except (TypeError, ValueError):
        return None


def predict_expenses(category_history: Dict[str, List[float]]) -> List[Dict[str, Any]]:
    """
    Forecast next month's spend per category from past expense amounts.

    Returns a list of {"category", "predicted_amount", "reasoning"}.
    """
    prompt = (
        "Here are a user's recent expense amounts grouped by category:\n"
        f"{json.dumps(category_history, indent=2)}\n\n"
        "Predict how much they will spend in each category next month. "
        'Respond with JSON: {"predictions": [{"category": "<name>", '
        '"predicted_amount": <number>, "reasoning": "<one sentence>"}]}'
    )
    data = _load_json(_complete([{"role": "user", "content": prompt}], json_response=True))

    predictions = data.get("predictions")
    if not isinstance(predictions, list):
        raise AIServiceError(f"Unparseable prediction response: {data!r}")
    return [
        {
            "category": str(item.get("category", "")),
            "predicted_amount": _optional_float(item.get("predicted_amount")) or 0.0,
            "reasoning": str(item.get("reasoning", "")),
        }
        for item in predictions
        if isinstance(item, dict)
    ]


def suggest_savings(expenses: Dict[str, float], income: float) -> List[Dict[str, Any]]:
    """Saving ideas for the given spend per category name and income."""
    prompt = (
        f"A user earned {income:.2f} and spent the following per category:\n"
        f"{json.dumps(expenses, indent=2)}\n\n"
        "Suggest up to 5 concrete ways to save money. "
        'Respond with JSON: {"suggestions": [{"title": "<short title>", '
        '"description": "<what to do>", "potential_savings": <monthly amount>}]}'
    )
    data = _load_json(_complete([
        {"role": "system", "content": "You are a helpful, cautious personal finance advisor."},
        {"role": "user", "content": prompt},
    ], json_response=True))

    suggestions = data.get("suggestions")
    if not isinstance(suggestions, list):
        raise AIServiceError(f"Unparseable saving suggestions response: {data!r}")
    return [
        {
            "title": str(item.get("title", "")),
            "description": str(item.get("description", "")),
            "potential_savings": _optional_float(item.get("potential_savings")),
        }
        for item in suggestions
        if isinstance(item, dict)
    ]


def analyze_receipt(content: bytes, content_type: str) -> Dict[str, Any]:
    """
    Read a receipt image with a vision-capable model.

    Returns {"merchant", "amount", "date", "items"}; fields the model could not
    read are None (items is always a list).
    """
    image_url = f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"
    data = _load_json(_complete([
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": (
                        "Extract the merchant name, total amount, purchase date (YYYY-MM-DD) "
                        "and line items from this receipt. "
                        'Respond with JSON: {"merchant": "<name>", "amount": <number>, '
                        '"date": "<YYYY-MM-DD>", "items": [{"name": "<item>", "price": <number>}]}'
                    ),
                },
                {"type": "image_url", "image_url": {"url": image_url}},
            ],
        },
    ], json_response=True))

    items = data.get("items") if isinstance(data.get("items"), list) else []
    return {
        "merchant": data.get("merchant") or None,
        "amount": _optional_float(data.get("amount")),
        "date": data.get("date") or None,
        "items": [
            {"name": str(item.get("name", "")), "price": _optional_float(item.get("price"))}
            for item in items
            if isinstance(item, dict)
        ],
    }
