"""
AI Router
Financial advice, categorization, expense prediction, saving suggestions
and receipt reading backed by the AI service.
"""
import logging
from typing import Dict

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from smartbudget.core.categories import DEFAULT_CATEGORY_CONFIG, categorize_description
from smartbudget.db import dynamo
from smartbudget.models.insight import CategorizeRequest, FinancialAdviceRequest, InsightInDB
from smartbudget.routers.auth import get_current_user_id
from smartbudget.utils import ai_service, receipts
from smartbudget.utils.analyzer import BudgetAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)
analyzer = BudgetAnalyzer()

RECENT_TRANSACTION_LIMIT = 100


def _quota_exceeded() -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": "AI service quota exceeded. Try again later.", "error": "QUOTA_EXCEEDED"},
    )


def _ai_service_error(detail: str) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": detail, "error": "AI_SERVICE_ERROR"})


@router.post("/financial-advice")
def financial_advice(request: FinancialAdviceRequest, user_id: str = Depends(get_current_user_id)):
    """Generate advice from recent activity and store it as an insight."""
    summary = analyzer.financial_summary(
        dynamo.get_transactions_by_user_id(user_id, RECENT_TRANSACTION_LIMIT),
        dynamo.get_categories_by_user_id(user_id),
        dynamo.get_goals_by_user_id(user_id),
    )

    try:
        advice = ai_service.generate_financial_advice(summary, topic=request.topic, question=request.question)
    except ai_service.AIQuotaExceededError:
        return _quota_exceeded()
    except ai_service.AIServiceError as e:
        logger.error(f"Failed to generate financial advice for user {user_id}: {str(e)}")
        return _ai_service_error("Failed to generate financial advice with AI")

    insight = InsightInDB(
        user_id=user_id,
        title="Monthly Financial Advice",
        content=advice,
        insight_type="advice",
    ).model_dump()
    insight_id = insight["insight_id"] if dynamo.put_insight(insight) else None
    if insight_id is None:
        logger.warning(f"Advice for user {user_id} could not be stored as an insight")

    return {"advice": advice, "insight_id": insight_id, "summary": summary}


@router.post("/categorize-transaction")
def categorize(request: CategorizeRequest, user_id: str = Depends(get_current_user_id)) -> Dict:
    """Keyword match first; fall back to the AI service for unmatched descriptions."""
    categories = dynamo.get_categories_by_user_id(user_id)
    names = {c["category_id"]: c["name"] for c in categories}

    category_id = categorize_description(request.description, DEFAULT_CATEGORY_CONFIG)
    if category_id:
        return {
            "category_id": category_id,
            "category_name": names.get(category_id),
            "confidence": 1.0,
            "source": "keywords",
        }

    try:
        result = ai_service.categorize_transaction(request.description, request.amount, list(names.values()))
    except ai_service.AIQuotaExceededError:
        return _quota_exceeded()
    except ai_service.AIServiceError as e:
        logger.warning(f"AI categorization unavailable: {str(e)}")
        return {"category_id": None, "category_name": None, "confidence": 0.0, "source": "none"}

    by_name = {name.lower(): cid for cid, name in names.items()}
    matched_id = by_name.get(result["category"].lower())
    if matched_id is None:
        fallback = DEFAULT_CATEGORY_CONFIG.find_by_name(result["category"])
        matched_id = fallback.category_id if fallback else None

    return {
        "category_id": matched_id,
        "category_name": names.get(matched_id) if matched_id else None,
        "confidence": result["confidence"] if matched_id else 0.0,
        "source": "ai",
    }


@router.post("/predict-expenses")
def predict_expenses(user_id: str = Depends(get_current_user_id)):
    """Next month's spend per category, forecast from the last 100 transactions."""
    history = analyzer.category_history(
        dynamo.get_transactions_by_user_id(user_id, RECENT_TRANSACTION_LIMIT),
        dynamo.get_categories_by_user_id(user_id),
    )

    try:
        predictions = ai_service.predict_expenses(history)
    except ai_service.AIQuotaExceededError:
        return _quota_exceeded()
    except ai_service.AIServiceError as e:
        logger.error(f"Failed to predict expenses for user {user_id}: {str(e)}")
        return _ai_service_error("Failed to predict expenses with AI")

    return {"predictions": predictions}


@router.post("/saving-suggestions")
def saving_suggestions(user_id: str = Depends(get_current_user_id)):
    summary = analyzer.financial_summary(
        dynamo.get_transactions_by_user_id(user_id, RECENT_TRANSACTION_LIMIT),
        dynamo.get_categories_by_user_id(user_id),
        dynamo.get_goals_by_user_id(user_id),
    )

    try:
        suggestions = ai_service.suggest_savings(summary["expenses"], summary["income"])
    except ai_service.AIQuotaExceededError:
        return _quota_exceeded()
    except ai_service.AIServiceError as e:
        logger.error(f"Failed to generate saving suggestions for user {user_id}: {str(e)}")
        return _ai_service_error("Failed to generate saving suggestions with AI")

    return {"suggestions": suggestions}


@router.post("/analyze-receipt")
async def analyze_receipt(
    receipt_image: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
):
    """Extract merchant, total, date and items from a receipt image, with a suggested category."""
    if receipt_image.content_type not in receipts.ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Receipt must be a JPEG, PNG, WebP or HEIC image")
    content = await receipt_image.read()
    if not content:
        raise HTTPException(status_code=400, detail="No receipt image uploaded")
    if len(content) > receipts.MAX_RECEIPT_BYTES:
        raise HTTPException(status_code=400, detail="Receipt image is larger than 5 MB")

    try:
        result = ai_service.analyze_receipt(content, receipt_image.content_type)
    except ai_service.AIQuotaExceededError:
        return _quota_exceeded()
    except ai_service.AIServiceError as e:
        logger.error(f"Failed to analyze receipt for user {user_id}: {str(e)}")
        return _ai_service_error("Failed to analyze receipt with AI")

    return {**result, "category_id": categorize_description(result["merchant"], DEFAULT_CATEGORY_CONFIG)}
