"""
TutorMatch Backend: Category Service Unit Tests
=================================================

What:  The header category loader returns index-aligned lists and never
       raises for database failures.
"""

import pytest
from sqlalchemy.exc import OperationalError

from tutormatch.services.category_service import CategoryService


class TestCategoryService:

    def setup_method(self):
        self.service = CategoryService()

    @pytest.mark.asyncio
    async def test_lists_are_aligned_and_ordered(self, db_session):
        categories = await self.service.get_search_categories(db_session)

        assert categories.short_names == ["CSC", "MATH"]
        assert categories.long_names == ["Computer Science", "Mathematics"]

    @pytest.mark.asyncio
    async def test_database_failure_gives_empty_lists(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("database is locked")
        )

        categories = await self.service.get_search_categories(mock_db_session)

        assert categories.short_names == []
        assert categories.long_names == []
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connection_error_gives_empty_lists(self, mock_db_session):
        mock_db_session.execute.side_effect = ConnectionRefusedError("no route")

        categories = await self.service.get_search_categories(mock_db_session)

        assert categories.short_names == []
