"""
TutorMatch Backend: Category Service
======================================

What:  Loads the searchable categories (majors) shown in every page header.
Who:   Called through the `load_search_categories` route dependency on every
       page (search, dashboard, tutor-post form).

Failure Policy:
    This is the one loader that degrades instead of raising. Categories only
    decorate the page header, so a database failure here is logged and the
    page is rendered with empty category lists.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.models import Major
from tutormatch.schemas.common import SearchCategories

logger = logging.getLogger(__name__)


class CategoryService:

    async def _rollback_quietly(self, db: AsyncSession) -> None:
        # The same session serves the rest of the request; clear the failed transaction
        try:
            await db.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Rollback after category failure also failed: %s", str(e))

    async def get_search_categories(self, db: AsyncSession) -> SearchCategories:
        """
        Fetch all majors as index-aligned short/long name lists.

        Never raises for database problems: returns empty lists instead.
        """
        try:
            result = await db.execute(
                select(Major.major_short_name, Major.major_long_name).order_by(
                    Major.major_short_name
                )
            )
            rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Could not load search categories: %s", str(e))
            await self._rollback_quietly(db)
            return SearchCategories()

        return SearchCategories(
            short_names=[row.major_short_name for row in rows],
            long_names=[row.major_long_name for row in rows],
        )


category_service = CategoryService()
