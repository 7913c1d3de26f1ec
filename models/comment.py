import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


class CommentCreate(BaseModel):
    """
    Public comment submission. Unknown fields such as ``approved`` are
    ignored, new comments always start unapproved.
    """
    model_config = ConfigDict(extra="ignore")

    project_id: int
    author_name: str = Field(..., min_length=1, max_length=255)
    author_email: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    rating: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("author_name", "author_email", "content", mode="before")
    @classmethod
    def _strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("author_email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value


class ApprovalRequest(BaseModel):
    approved: bool


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    author_name: str
    author_email: str
    content: str
    rating: Optional[int] = None
    approved: bool
    created_at: datetime


class CommentWithProject(CommentOut):
    project_title: str
