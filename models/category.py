from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryPayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., pattern=COLOR_PATTERN)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    description: Optional[str] = None
    created_at: datetime


class CategoryWithCount(CategoryOut):
    project_count: int = 0
