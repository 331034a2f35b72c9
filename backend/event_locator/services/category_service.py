"""
Category Service

Reference data lookups. Events and user preferences associate categories
best-effort: ``get_many`` returns only the ids that exist and callers skip
the rest.
"""

from collections.abc import Iterable
from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.core.exceptions import InvalidArgument, ServerError
from event_locator.core.logging import get_logger
from event_locator.models.category import Category

logger = get_logger(__name__)


class CategoryService:
    """Service for listing, creating and resolving categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> List[Category]:
        """All categories ordered by name."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_many(self, ids: Iterable[int]) -> List[Category]:
        """
        Resolve category ids, silently dropping unknown ones.

        Duplicate ids collapse to one category.
        """
        wanted = set(ids)
        if not wanted:
            return []

        result = await self.db.execute(
            select(Category).where(Category.id.in_(wanted)).order_by(Category.name)
        )
        categories = list(result.scalars().all())

        skipped = wanted - {category.id for category in categories}
        if skipped:
            logger.info("unknown_categories_skipped", category_ids=sorted(skipped))

        return categories

    async def create(self, name: str) -> Category:
        """
        Create a category.

        Raises:
            InvalidArgument: A category with this name (case-insensitive) exists
            ServerError: The write failed
        """
        name = name.strip()
        if not name:
            raise InvalidArgument("Category name is required", code="category_required")

        existing = await self.db.execute(
            select(Category.id).where(func.lower(Category.name) == name.lower())
        )
        if existing.scalar_one_or_none() is not None:
            raise InvalidArgument("Category already exists", code="category_exists")

        category = Category(name=name)
        self.db.add(category)

        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent create
            await self.db.rollback()
            raise InvalidArgument("Category already exists", code="category_exists") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("category_create_failed", name=name, error=str(e))
            raise ServerError() from e

        logger.info("category_created", category_id=category.id, name=category.name)
        return category
