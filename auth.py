"""
Authentication routes and dependencies
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from auth_utils import create_jwt, decode_jwt, verify_password
from backend.utils.errors import ForbiddenError, UnauthorizedError
from backend.utils.responses import success_response
from crud.user import UserRepository
from database import get_db
from models.user import Capability, LoginRequest, UserClaims, role_has
from utils.shared_utils import log_endpoint_event

logger = logging.getLogger(__name__)

# Create auth router
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid credentials"


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


# Dependency for protected routes
async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> UserClaims:
    """
    Dependency function to get the authenticated identity.

    Missing, malformed, expired and badly signed tokens all fail the same way.
    """
    token = _extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Missing authentication token")

    claims = decode_jwt(token)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token")
    return claims


def require_capability(capability: Capability):
    """Build a dependency that admits only identities whose role grants ``capability``"""

    async def checker(current_user: UserClaims = Depends(get_current_user)) -> UserClaims:
        if not role_has(current_user.role, capability):
            raise ForbiddenError("Admin access required")
        return current_user

    return checker


require_admin = require_capability(Capability.MANAGE_CONTENT)
require_moderator = require_capability(Capability.MODERATE_COMMENTS)


@auth_router.post("/login")
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login and get JWT token"""
    user_repo = UserRepository(db)
    user = await user_repo.get_user_by_email(request.email)

    # Unknown email and wrong password are indistinguishable to the caller
    password_hash = user.password_hash if user else None
    if not verify_password(request.password, password_hash):
        log_endpoint_event("/auth/login", None, "rejected", {})
        raise UnauthorizedError(INVALID_CREDENTIALS)

    claims = UserClaims(id=user.id, email=user.email, role=user.role)
    token = create_jwt(claims)

    log_endpoint_event("/auth/login", user.id, "success", {})
    return success_response(
        data={"token": token, "user": claims.model_dump(mode="json")},
        message="Login successful"
    )


@auth_router.get("/verify")
async def verify(current_user: UserClaims = Depends(get_current_user)):
    """Confirm that the presented token is valid"""
    return success_response(
        data={"valid": True, "user": current_user.model_dump(mode="json")},
        message="Token is valid"
    )
