from enum import Enum
from typing import Dict, FrozenSet

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    ADMIN = "admin"


class Capability(str, Enum):
    MANAGE_CONTENT = "manage_content"
    MODERATE_COMMENTS = "moderate_comments"


# New roles are added here with the capabilities they grant
ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.ADMIN: frozenset({Capability.MANAGE_CONTENT, Capability.MODERATE_COMMENTS}),
}


def role_has(role: str, capability: Capability) -> bool:
    """Return True if ``role`` grants ``capability``. Unknown roles grant nothing."""
    try:
        return capability in ROLE_CAPABILITIES.get(Role(role), frozenset())
    except ValueError:
        return False


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserClaims(BaseModel):
    """Identity carried inside a signed token. ``role`` is kept as issued; ``role_has`` decides what it grants."""
    id: int
    email: str
    role: str

    @field_validator("role", mode="before")
    @classmethod
    def _role_value(cls, v):
        return v.value if isinstance(v, Enum) else v
