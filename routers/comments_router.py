"""
Comments router - public submission and listing, admin moderation
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_moderator
from backend.utils.responses import success_response
from crud.comment import CommentRepository
from database import get_db
from models.comment import ApprovalRequest, CommentCreate, CommentOut, CommentWithProject
from models.user import UserClaims
from utils.shared_utils import log_endpoint_event

comments_router = APIRouter(prefix="/api/comments", tags=["comments"])


def _serialize(comment) -> dict:
    return CommentOut.model_validate(comment).model_dump(mode="json")


@comments_router.get("/project/{project_id}")
async def list_project_comments(project_id: int, db: AsyncSession = Depends(get_db)):
    """Approved comments of a project, newest first"""
    comments = await CommentRepository(db).list_approved_for_project(project_id)
    return success_response(data={"comments": [_serialize(c) for c in comments]})


@comments_router.get("/admin")
async def list_all_comments(
    approved: Optional[bool] = None,
    current_user: UserClaims = Depends(require_moderator),
    db: AsyncSession = Depends(get_db),
):
    rows = await CommentRepository(db).list_all(approved=approved)
    comments = [
        CommentWithProject(**_serialize(comment), project_title=title).model_dump(mode="json")
        for comment, title in rows
    ]
    return success_response(data={"comments": comments})


@comments_router.post("")
async def create_comment(payload: CommentCreate, db: AsyncSession = Depends(get_db)):
    comment = await CommentRepository(db).create_comment(payload)

    log_endpoint_event("/comments/create", comment.id, "success", {"project_id": comment.project_id})
    return success_response(
        data={"comment": _serialize(comment)},
        message="Comment submitted. It will be reviewed before it is published.",
        status=201,
    )


@comments_router.patch("/{comment_id}/approve")
async def set_comment_approval(
    comment_id: int,
    request: ApprovalRequest,
    current_user: UserClaims = Depends(require_moderator),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentRepository(db).set_approval(comment_id, request.approved)

    log_endpoint_event("/comments/approve", comment_id, "success", {"approved": request.approved})
    return success_response(
        data={"comment": _serialize(comment)},
        message="Comment approved" if request.approved else "Comment rejected",
    )


@comments_router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    current_user: UserClaims = Depends(require_moderator),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentRepository(db).delete_comment(comment_id)

    log_endpoint_event("/comments/delete", comment_id, "success", {})
    return success_response(data={"deleted": _serialize(comment)}, message="Comment deleted")
