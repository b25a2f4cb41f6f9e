from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import uuid4
from datetime import datetime


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str = "tag"
    color: str = "#6366f1"


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    icon: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name", "icon", "color")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class CategoryInDB(CategoryCreate):
    category_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
