"""
Admin Tools - operator-only reset of the default admin credential

Available two ways:
- POST /api/auth/reset-admin, only with the pre-shared ``X-Admin-Reset-Token``
  header matching ADMIN_RESET_TOKEN (the route is disabled while it is unset)
- ``python admin_tools.py reset-admin`` run against the configured database
"""
import argparse
import asyncio
import hmac
import logging
import sys
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.utils.errors import ForbiddenError
from backend.utils.responses import success_response
from config.settings import settings
from crud.user import UserRepository
from database import create_database, get_db
from utils.shared_utils import log_endpoint_event

logger = logging.getLogger(__name__)

# Mounted next to the auth routes
admin_router = APIRouter(prefix="/api/auth", tags=["admin"])


class ResetAdminRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


async def reset_admin_credential(db: AsyncSession, email: Optional[str] = None,
                                 password: Optional[str] = None) -> dict:
    """
    Replace the admin account with a fresh one.

    Falls back to ADMIN_EMAIL / ADMIN_PASSWORD for anything not given.
    """
    email = email or settings.admin_email
    password = password or settings.admin_password
    await UserRepository(db).reset_admin(email, password)
    logger.info(f"Admin user reset: {email}")
    return {"email": email, "password": password}


def require_operator_token(
    request: Request,
    reset_token: Optional[str] = Header(None, alias="X-Admin-Reset-Token"),
):
    expected = request.app.state.settings.admin_reset_token
    if not expected:
        raise ForbiddenError("Admin reset is disabled")
    if not reset_token or not hmac.compare_digest(reset_token, expected):
        raise ForbiddenError("Invalid operator token")


@admin_router.post("/reset-admin", dependencies=[Depends(require_operator_token)])
async def reset_admin(
    request: Optional[ResetAdminRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    """Reset the default admin credential (operator use only)"""
    request = request or ResetAdminRequest()
    credentials = await reset_admin_credential(db, request.email, request.password)

    log_endpoint_event("/auth/reset-admin", None, "success", {"email": credentials["email"]})
    return success_response(data={"credentials": credentials}, message="Admin user reset")


async def _run_reset(email: Optional[str], password: Optional[str]) -> dict:
    database = create_database(settings)
    try:
        await database.create_all()
        async with database.session_factory() as session:
            return await reset_admin_credential(session, email, password)
    finally:
        await database.dispose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Portfolio API operator tools")
    subcommands = parser.add_subparsers(dest="command", required=True)

    reset = subcommands.add_parser("reset-admin", help="Reset the default admin credential")
    reset.add_argument("--email", help="Admin email (defaults to ADMIN_EMAIL)")
    reset.add_argument("--password", help="Admin password (defaults to ADMIN_PASSWORD)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        credentials = asyncio.run(_run_reset(args.email, args.password))
    except Exception as e:
        logger.error(f"Admin reset failed: {e}")
        return 1

    print("Admin user configured")
    print(f"Email: {credentials['email']}")
    print(f"Password: {credentials['password']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
