"""
Integration test for the project / comment persistence workflow.

Works directly against the repositories to check what is stored:
1. Project creation
2. Comment submission and moderation
3. Project deletion removing the comment rows
"""
import pytest
from sqlalchemy import func, select

from backend.utils.errors import NotFoundError
from crud.comment import CommentRepository
from crud.project import ProjectRepository
from database_models import Comment
from models.comment import CommentCreate
from models.project import ProjectPayload


@pytest.mark.asyncio
async def test_full_project_and_comment_lifecycle(test_db):
    projects = ProjectRepository(test_db)
    comments = CommentRepository(test_db)

    # Step 1: Project creation
    project = await projects.create_project(
        ProjectPayload(title="Museum", description="3D museum", technologies="Three.js, WebXR")
    )
    assert project.technologies == ["Three.js", "WebXR"]
    assert project.category == "web"

    # Step 2: Comments start unapproved and become visible once approved
    comment = await comments.create_comment(CommentCreate(
        project_id=project.id,
        author_name="Grace",
        author_email="grace@example.com",
        content="Impressive",
        rating=4,
    ))
    assert comment.approved is False
    assert await comments.list_approved_for_project(project.id) == []

    await comments.set_approval(comment.id, True)
    visible = await comments.list_approved_for_project(project.id)
    assert [c.id for c in visible] == [comment.id]

    rows = await comments.list_all(approved=True)
    assert [(c.id, title) for c, title in rows] == [(comment.id, "Museum")]

    # Step 3: Deleting the project removes its comment rows
    deleted = await projects.delete_project(project.id)
    assert deleted.id == project.id

    remaining = await test_db.scalar(select(func.count(Comment.id)).where(Comment.project_id == project.id))
    assert remaining == 0

    with pytest.raises(NotFoundError):
        await projects.get_project(project.id)


@pytest.mark.asyncio
async def test_comment_for_missing_project(test_db):
    with pytest.raises(NotFoundError):
        await CommentRepository(test_db).create_comment(CommentCreate(
            project_id=99999,
            author_name="Grace",
            author_email="grace@example.com",
            content="Hello",
        ))
