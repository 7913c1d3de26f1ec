"""
UserRepository for database operations on User model
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select

from auth_utils import hash_password
from database_models import User
from models.user import Role


class UserRepository:
    """
    Repository class for User database operations.
    Encapsulates all database logic for the User model.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: AsyncSession instance for database operations
        """
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """
        Retrieve a user by email address.

        Args:
            email: User's email address (exact match)

        Returns:
            User object if found, None otherwise
        """
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def create_user(self, email: str, password: str, role: Role = Role.ADMIN) -> User:
        """
        Create a new user with a freshly hashed password.

        Returns:
            Created User object
        """
        user = User(
            email=email,
            password_hash=hash_password(password),
            role=role.value,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def ensure_admin(self, email: str, password: str) -> bool:
        """
        Create the admin account if no user with ``email`` exists.

        Returns:
            True if a user was created
        """
        if await self.get_user_by_email(email):
            return False
        await self.create_user(email, password, Role.ADMIN)
        return True

    async def reset_admin(self, email: str, password: str) -> User:
        """
        Replace any user registered under ``email`` with a fresh admin account.
        """
        await self.db.execute(delete(User).where(User.email == email))
        user = User(
            email=email,
            password_hash=hash_password(password),
            role=Role.ADMIN.value,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user
