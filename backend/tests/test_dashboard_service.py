"""
TutorMatch Backend: Dashboard Service Unit Tests
==================================================

What:  Inbox loading for the authenticated user.
How:   Seeded messages to user 2: #1 (Jan 1, unread, from Alice),
       #3 (Jan 2, unread, from Alice), #2 (Jan 3, read, from Carla).
"""

import pytest
from sqlalchemy.exc import OperationalError

from tutormatch.exceptions import DatabaseError
from tutormatch.services.dashboard_service import DashboardService


class TestDashboardService:

    def setup_method(self):
        self.service = DashboardService()

    @pytest.mark.asyncio
    async def test_messages_newest_first(self, db_session):
        data = await self.service.load_dashboard(db_session, user_id=2)

        assert [m.message_id for m in data.messages] == [2, 3, 1]

    @pytest.mark.asyncio
    async def test_status_comes_from_each_row(self, db_session):
        data = await self.service.load_dashboard(db_session, user_id=2)

        statuses = {m.message_id: m.status for m in data.messages}
        assert statuses == {2: "Read", 3: "Unread", 1: "Unread"}
        assert data.unread_count == 2

    @pytest.mark.asyncio
    async def test_sender_name_and_text(self, db_session):
        data = await self.service.load_dashboard(db_session, user_id=2)

        newest = data.messages[0]
        assert newest.sender_id == 3
        assert newest.sender_name == "Carla Chen"
        assert newest.message_text == "Thanks for the session!"

    @pytest.mark.asyncio
    async def test_only_messages_to_the_user(self, db_session):
        data = await self.service.load_dashboard(db_session, user_id=5)

        assert [m.message_id for m in data.messages] == [4]
        assert data.messages[0].sender_name == "Brian Baker"

    @pytest.mark.asyncio
    async def test_empty_inbox_is_not_an_error(self, db_session):
        data = await self.service.load_dashboard(db_session, user_id=4)

        assert data.messages == []
        assert data.unread_count == 0

    @pytest.mark.asyncio
    async def test_database_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("server closed the connection")
        )

        with pytest.raises(DatabaseError):
            await self.service.load_dashboard(mock_db_session, user_id=2)
