"""
Categories router - public listing and admin management of project categories
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from backend.utils.responses import success_response
from crud.category import CategoryRepository
from database import get_db
from models.category import CategoryOut, CategoryPayload, CategoryWithCount
from models.user import UserClaims
from utils.shared_utils import log_endpoint_event

categories_router = APIRouter(prefix="/api/categories", tags=["categories"])


def _serialize(category) -> dict:
    return CategoryOut.model_validate(category).model_dump(mode="json")


@categories_router.get("")
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories ordered by name, each with the number of projects using it"""
    rows = await CategoryRepository(db).list_categories()
    categories = [
        CategoryWithCount(**_serialize(category), project_count=count).model_dump(mode="json")
        for category, count in rows
    ]
    return success_response(data={"categories": categories})


@categories_router.get("/{category_id}")
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await CategoryRepository(db).get_category(category_id)
    return success_response(data={"category": _serialize(category)})


@categories_router.post("")
async def create_category(
    payload: CategoryPayload,
    current_user: UserClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryRepository(db).create_category(payload)

    log_endpoint_event("/categories/create", category.id, "success", {"name": category.name})
    return success_response(data={"category": _serialize(category)}, message="Category created", status=201)


@categories_router.put("/{category_id}")
async def update_category(
    category_id: int,
    payload: CategoryPayload,
    current_user: UserClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryRepository(db).update_category(category_id, payload)

    log_endpoint_event("/categories/update", category_id, "success", {"name": category.name})
    return success_response(data={"category": _serialize(category)}, message="Category updated")


@categories_router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    current_user: UserClaims = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await CategoryRepository(db).delete_category(category_id)

    log_endpoint_event("/categories/delete", category_id, "success", {"name": category.name})
    return success_response(data={"deleted": _serialize(category)}, message="Category deleted")
