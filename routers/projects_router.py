import logging
import secrets
import time
from pathlib import Path
from typing import List, Optional

import aiofiles
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from backend.utils.errors import BadRequestError, validation_error_fields
from backend.utils.responses import success_response
from crud.project import ProjectRepository
from database import get_db
from models.project import ProjectOut, ProjectPayload
from models.user import UserClaims
from utils.security_utils import validate_uploaded_image
from utils.shared_utils import log_endpoint_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


def project_form(
    title: str = Form(...),
    description: str = Form(...),
    technologies: List[str] = Form(...),
    github_url: Optional[str] = Form(None),
    demo_url: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    featured: bool = Form(False),
) -> ProjectPayload:
    """Collect the multipart form fields into a validated payload"""
    try:
        return ProjectPayload(
            title=title,
            description=description,
            technologies=technologies,
            github_url=github_url,
            demo_url=demo_url,
            category=category,
            featured=featured,
        )
    except ValidationError as e:
        raise BadRequestError(
            "Invalid request",
            data={"fields": validation_error_fields(e.errors())},
        )


async def store_project_image(request: Request, image: Optional[UploadFile]) -> Optional[str]:
    """
    Save an uploaded image under the uploads directory.

    Returns:
        Public URL of the stored file, or None when nothing was uploaded
    """
    if image is None or not image.filename:
        return None

    ext, content = await validate_uploaded_image(image)
    uploads_dir = Path(request.app.state.settings.uploads_dir)
    uploads_dir.mkdir(parents=True, exist_ok=True)

    filename = f"project-{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}{ext}"
    async with aiofiles.open(uploads_dir / filename, "wb") as f:
        await f.write(content)

    logger.info(f"Stored project image {filename} ({len(content)} bytes)")
    return f"/uploads/{filename}"


def discard_project_image(request: Request, image_url: Optional[str]) -> None:
    """Remove a stored image whose project row was never written"""
    if not image_url:
        return
    path = Path(request.app.state.settings.uploads_dir) / image_url.rsplit("/", 1)[1]
    path.unlink(missing_ok=True)
    logger.info(f"Discarded project image {path.name}")


def _serialize(project) -> dict:
    return ProjectOut.model_validate(project).model_dump(mode="json")


@router.get("")
async def list_projects(
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    """Public listing, newest first, with optional category / featured filters"""
    projects = await ProjectRepository(db).list_projects(category=category, featured=featured)
    return success_response(data={"projects": [_serialize(p) for p in projects]})


@router.get("/{project_id}")
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await ProjectRepository(db).get_project(project_id)
    return success_response(data={"project": _serialize(project)})


@router.post("")
async def create_project(
    request: Request,
    current_user: UserClaims = Depends(require_admin),
    payload: ProjectPayload = Depends(project_form),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    image_url = await store_project_image(request, image)
    try:
        project = await ProjectRepository(db).create_project(payload, image_url=image_url)
    except Exception:
        discard_project_image(request, image_url)
        raise

    log_endpoint_event("/projects/create", project.id, "success", {"user": current_user.id})
    return success_response(data={"project": _serialize(project)}, message="Project created", status=201)


@router.put("/{project_id}")
async def update_project(
    request: Request,
    project_id: int,
    current_user: UserClaims = Depends(require_admin),
    payload: ProjectPayload = Depends(project_form),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    """Full replace of a project; the current image is kept unless a new one is uploaded"""
    repo = ProjectRepository(db)
    # Fail before touching the filesystem when the project is gone
    await repo.get_project(project_id)
    image_url = await store_project_image(request, image)
    try:
        project = await repo.update_project(project_id, payload, image_url=image_url)
    except Exception:
        discard_project_image(request, image_url)
        raise

    log_endpoint_event("/projects/update", project.id, "success", {"user": current_user.id})
    return success_response(data={"project": _serialize(project)}, message="Project updated")


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    current_user: UserClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    project = await ProjectRepository(db).delete_project(project_id)

    log_endpoint_event("/projects/delete", project_id, "success", {"user": current_user.id})
    return success_response(data={"deleted": _serialize(project)}, message="Project deleted")
