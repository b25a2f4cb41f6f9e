from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional
from uuid import uuid4
from datetime import date, datetime

from smartbudget.core.config import settings

BudgetPeriod = Literal["monthly", "quarterly", "yearly"]


class BudgetCreate(BaseModel):
    category_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    period: BudgetPeriod = "monthly"
    start_date: date
    end_date: Optional[date] = None
    alert_threshold: int = Field(default_factory=lambda: settings.DEFAULT_ALERT_THRESHOLD, ge=0, le=100)

    @model_validator(mode="after")
    def default_end_date(self):
        if self.end_date is None:
            self.end_date = self.start_date
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BudgetUpdate(BaseModel):
    category_id: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    period: Optional[BudgetPeriod] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    alert_threshold: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("category_id", "amount", "period", "start_date", "alert_threshold")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class BudgetInDB(BudgetCreate):
    budget_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
