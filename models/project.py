from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import DEFAULT_CATEGORY


def split_technologies(value: Union[str, List[str], None]) -> List[str]:
    """
    Normalize technologies into an ordered list.

    Accepts a comma-delimited string or a list whose entries may themselves be
    comma-delimited. Entries are trimmed and empty entries dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    technologies = []
    for entry in value:
        technologies.extend(part.strip() for part in str(entry).split(","))
    return [tech for tech in technologies if tech]


class ProjectPayload(BaseModel):
    """Mutable project fields, as submitted by the admin form"""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    technologies: List[str] = Field(..., min_length=1)
    github_url: Optional[str] = Field(default=None, max_length=500)
    demo_url: Optional[str] = Field(default=None, max_length=500)
    category: str = Field(default=DEFAULT_CATEGORY, max_length=100)
    featured: bool = False

    @field_validator("technologies", mode="before")
    @classmethod
    def _split_technologies(cls, value):
        return split_technologies(value)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("github_url", "demo_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY
        return value.strip() if isinstance(value, str) else value


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    technologies: List[str]
    image_url: Optional[str] = None
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    category: str
    featured: bool
    created_at: datetime
    updated_at: datetime
