import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import uuid4


class TransactionCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    date: dt.date
    is_income: bool = False
    category_id: Optional[str] = None
    account_id: Optional[str] = None
    notes: str = ""
    receipt_image_url: Optional[str] = None


class TransactionUpdate(BaseModel):
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    date: Optional[dt.date] = None
    is_income: Optional[bool] = None
    category_id: Optional[str] = None
    account_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("description", "amount", "date", "is_income", "notes")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class TransactionInDB(TransactionCreate):
    transaction_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: str = Field(default_factory=lambda: dt.datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: dt.datetime.utcnow().isoformat())
