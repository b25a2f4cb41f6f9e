from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from uuid import uuid4
from datetime import date, datetime

RecurringPeriod = Literal["once", "weekly", "monthly", "quarterly", "yearly"]


class BillCreate(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    due_date: date
    recurring_period: RecurringPeriod = "monthly"
    category_id: Optional[str] = None
    is_paid: bool = False
    notes: str = ""
    reminder_days: int = Field(default=3, ge=0)


class BillUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    recurring_period: Optional[RecurringPeriod] = None
    category_id: Optional[str] = None
    is_paid: Optional[bool] = None
    notes: Optional[str] = None
    reminder_days: Optional[int] = Field(default=None, ge=0)

    @field_validator("name", "amount", "due_date", "recurring_period", "is_paid", "notes", "reminder_days")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class BillInDB(BillCreate):
    bill_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
