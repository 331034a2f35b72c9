"""Category endpoints."""

from typing import List

from fastapi import APIRouter, status

from event_locator.core.auth import CurrentUser
from event_locator.db.deps import DBSession
from event_locator.schemas.category import CategoryCreate, CategoryResponse
from event_locator.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: DBSession) -> List[CategoryResponse]:
    categories = await CategoryService(db).list_categories()
    return [CategoryResponse.model_validate(category) for category in categories]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    current_user: CurrentUser,
    db: DBSession,
) -> CategoryResponse:
    """Create a category. Any authenticated user may add one."""
    category = await CategoryService(db).create(data.name)
    return CategoryResponse.model_validate(category)
