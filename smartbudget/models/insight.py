from pydantic import BaseModel, Field
from typing import Optional
from uuid import uuid4
from datetime import datetime


class InsightInDB(BaseModel):
    insight_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    content: str
    insight_type: str
    severity: str = "info"
    is_read: bool = False
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class FinancialAdviceRequest(BaseModel):
    topic: Optional[str] = None
    question: Optional[str] = None


class CategorizeRequest(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)


class AdminReminderRequest(BaseModel):
    api_key: str
