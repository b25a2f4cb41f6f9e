from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from uuid import uuid4
from datetime import date, datetime

Priority = Literal["low", "medium", "high"]


class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(default=0.0, ge=0)
    target_date: date
    category: str = Field(..., min_length=1)
    description: str = ""
    priority: Priority = "medium"


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    target_amount: Optional[float] = Field(default=None, gt=0)
    current_amount: Optional[float] = Field(default=None, ge=0)
    target_date: Optional[date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None

    @field_validator("name", "target_amount", "current_amount", "target_date", "category", "description", "priority")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class GoalInDB(GoalCreate):
    goal_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
