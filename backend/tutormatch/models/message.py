"""
TutorMatch Backend: Message Model
===================================

What:  The `messages` table. Read-only from this service's point of view;
       nothing here sends a message or marks one as read.

Query Patterns:
    - Dashboard inbox: WHERE to_user = :user_id ORDER BY date_sent DESC
      → idx_messages_to_user_date
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text, func, true
from sqlalchemy.orm import Mapped, mapped_column

from tutormatch.database import Base


class Message(Base):
    __tablename__ = "messages"

    message_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    date_sent: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    message_text: Mapped[str] = mapped_column(Text, nullable=False)

    to_user: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )

    from_user: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )

    is_unread: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    def __repr__(self) -> str:
        return (
            f"<Message(id={self.message_id}, from={self.from_user}, "
            f"to={self.to_user}, unread={self.is_unread})>"
        )


# Dashboard inbox: WHERE to_user = ? ORDER BY date_sent DESC
Index("idx_messages_to_user_date", Message.to_user, Message.date_sent.desc())
