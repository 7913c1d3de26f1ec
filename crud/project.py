"""
ProjectRepository for database operations on Project model
"""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.utils.errors import NotFoundError
from database_models import Project, utcnow
from models.project import ProjectPayload


class ProjectRepository:
    """
    Repository class for Project database operations.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_projects(self, category: Optional[str] = None,
                            featured: Optional[bool] = None) -> List[Project]:
        """
        List projects, newest first.

        Args:
            category: Only projects in this category
            featured: Only projects whose featured flag equals this value

        Returns:
            Matching projects. Filters are combined with AND; a filter left
            as None does not constrain the result.
        """
        query = select(Project)
        if category:
            query = query.where(Project.category == category)
        if featured is not None:
            query = query.where(Project.featured == featured)
        query = query.order_by(Project.created_at.desc(), Project.id.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_project(self, project_id: int) -> Project:
        result = await self.db.execute(
            select(Project).where(Project.id == project_id)
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError("Project not found")
        await self.db.refresh(project)
        return project

    async def exists(self, project_id: int) -> bool:
        result = await self.db.execute(
            select(Project.id).where(Project.id == project_id)
        )
        return result.scalar_one_or_none() is not None

    async def create_project(self, payload: ProjectPayload, image_url: Optional[str] = None) -> Project:
        project = Project(**payload.model_dump(), image_url=image_url)
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def update_project(self, project_id: int, payload: ProjectPayload,
                             image_url: Optional[str] = None) -> Project:
        """
        Replace every mutable field of a project.

        The stored image is kept unless ``image_url`` is given.
        """
        project = await self.get_project(project_id)
        for key, value in payload.model_dump().items():
            setattr(project, key, value)
        if image_url:
            project.image_url = image_url
        project.updated_at = utcnow()

        try:
            await self.db.commit()
        except StaleDataError:
            # Deleted by a concurrent request after the lookup
            await self.db.rollback()
            raise NotFoundError("Project not found")
        await self.db.refresh(project)
        return project

    async def delete_project(self, project_id: int) -> Project:
        """
        Delete a project. Its comments are removed by the database's
        ON DELETE CASCADE.
        """
        project = await self.get_project(project_id)
        await self.db.execute(delete(Project).where(Project.id == project_id))
        await self.db.commit()
        return project
