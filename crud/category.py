"""
CategoryRepository for database operations on Category model
"""

from typing import List, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.utils.errors import ConflictError, NotFoundError
from database_models import Category, Project
from models.category import CategoryPayload

DUPLICATE_NAME_MESSAGE = "A category with that name already exists"


class CategoryRepository:
    """
    Repository class for Category database operations.

    Projects refer to categories by name, so the link is checked here rather
    than by a foreign key.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> List[Tuple[Category, int]]:
        """
        Returns:
            (category, project_count) pairs ordered by name
        """
        project_count = func.count(Project.id).label("project_count")
        result = await self.db.execute(
            select(Category, project_count)
            .outerjoin(Project, Project.category == Category.name)
            .group_by(Category.id)
            .order_by(Category.name)
        )
        return [(category, count) for category, count in result.all()]

    async def get_category(self, category_id: int) -> Category:
        result = await self.db.execute(
            select(Category).where(Category.id == category_id)
        )
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def _name_taken(self, name: str, exclude_id: int = None) -> bool:
        query = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def _commit_unique(self):
        # The UNIQUE constraint decides races the pre-check cannot see
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

    async def create_category(self, payload: CategoryPayload) -> Category:
        if await self._name_taken(payload.name):
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

        category = Category(**payload.model_dump())
        self.db.add(category)
        await self._commit_unique()
        await self.db.refresh(category)
        return category

    async def update_category(self, category_id: int, payload: CategoryPayload) -> Category:
        category = await self.get_category(category_id)
        if await self._name_taken(payload.name, exclude_id=category_id):
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

        for key, value in payload.model_dump().items():
            setattr(category, key, value)
        await self._commit_unique()
        return category

    async def count_projects(self, name: str) -> int:
        result = await self.db.execute(
            select(func.count(Project.id)).where(Project.category == name)
        )
        return result.scalar_one()

    async def delete_category(self, category_id: int) -> Category:
        category = await self.get_category(category_id)
        if await self.count_projects(category.name) > 0:
            raise ConflictError("Cannot delete the category because it has associated projects")

        await self.db.execute(delete(Category).where(Category.id == category_id))
        await self.db.commit()
        return category
