"""
TutorMatch Backend: Dashboard Service
=======================================

What:  Loads the authenticated user's inbox for GET /dashboard.
How:   messages JOIN users (sender) WHERE to_user = :user_id
       ORDER BY date_sent DESC, each row mapped to a MessageEntry.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.exceptions import DatabaseError
from tutormatch.models import Message, User
from tutormatch.schemas.dashboard import DashboardData, MessageEntry

logger = logging.getLogger(__name__)

STATUS_UNREAD = "Unread"
STATUS_READ = "Read"


class DashboardService:

    async def load_dashboard(self, db: AsyncSession, user_id: int) -> DashboardData:
        """
        Fetch every message addressed to `user_id`, newest first.

        An empty inbox is a normal, empty DashboardData.

        Raises:
            DatabaseError: Query execution failed
        """
        stmt = (
            select(
                Message.message_id,
                Message.date_sent,
                Message.message_text,
                Message.from_user,
                Message.is_unread,
                User.first_name,
                User.last_name,
            )
            .join(User, User.user_id == Message.from_user)
            .where(Message.to_user == user_id)
            .order_by(Message.date_sent.desc(), Message.message_id.desc())
        )

        try:
            rows = (await db.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database error loading dashboard for user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not load your messages. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            ) from e

        messages = [
            MessageEntry(
                message_id=row.message_id,
                sender_id=row.from_user,
                sender_name=f"{row.first_name} {row.last_name}",
                message_text=row.message_text,
                date_time=row.date_sent,
                status=STATUS_UNREAD if row.is_unread else STATUS_READ,
            )
            for row in rows
        ]

        return DashboardData(
            messages=messages,
            unread_count=sum(1 for m in messages if m.status == STATUS_UNREAD),
        )


dashboard_service = DashboardService()
