from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import uuid4
from datetime import datetime


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)  # checking, savings, credit, cash, ...
    balance: float = 0.0
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: str = ""
    external_account_id: Optional[str] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    balance: Optional[float] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    description: Optional[str] = None

    @field_validator("name", "type", "balance", "currency", "description")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value
    external_account_id: Optional[str] = None


class AccountInDB(AccountCreate):
    account_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
