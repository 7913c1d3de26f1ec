"""
CommentRepository for database operations on Comment model
"""

from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.utils.errors import NotFoundError
from crud.project import ProjectRepository
from database_models import Comment, Project
from models.comment import CommentCreate


class CommentRepository:
    """
    Repository class for Comment database operations.

    Comments are created unapproved and only become publicly visible once an
    admin approves them.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_approved_for_project(self, project_id: int) -> List[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.project_id == project_id, Comment.approved == True)  # noqa: E712
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return list(result.scalars().all())

    async def list_all(self, approved: Optional[bool] = None) -> List[Tuple[Comment, str]]:
        """
        Returns:
            (comment, project_title) pairs, newest first, optionally filtered
            on the approved flag
        """
        query = select(Comment, Project.title).join(Project, Comment.project_id == Project.id)
        if approved is not None:
            query = query.where(Comment.approved == approved)
        query = query.order_by(Comment.created_at.desc(), Comment.id.desc())

        result = await self.db.execute(query)
        return [(comment, title) for comment, title in result.all()]

    async def create_comment(self, payload: CommentCreate) -> Comment:
        if not await ProjectRepository(self.db).exists(payload.project_id):
            raise NotFoundError("Project not found")

        comment = Comment(
            project_id=payload.project_id,
            author_name=payload.author_name,
            author_email=payload.author_email,
            content=payload.content,
            rating=payload.rating,
            approved=False,
        )
        self.db.add(comment)
        try:
            await self.db.commit()
        except IntegrityError:
            # Project removed between the existence check and the insert
            await self.db.rollback()
            raise NotFoundError("Project not found")
        await self.db.refresh(comment)
        return comment

    async def get_comment(self, comment_id: int) -> Comment:
        result = await self.db.execute(
            select(Comment).where(Comment.id == comment_id)
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def set_approval(self, comment_id: int, approved: bool) -> Comment:
        comment = await self.get_comment(comment_id)
        comment.approved = approved
        await self.db.commit()
        return comment

    async def delete_comment(self, comment_id: int) -> Comment:
        comment = await self.get_comment(comment_id)
        await self.db.execute(delete(Comment).where(Comment.id == comment_id))
        await self.db.commit()
        return comment
