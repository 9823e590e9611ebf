"""
TutorMatch Backend: Tutor Post Model
======================================

What:  ORM model for the `tutor_post` table: a user's offer to tutor a course.

Lifecycle:
    1. Created by the tutor-post form (admin_approved = False)
    2. An administrator flips admin_approved to True (outside this service)
    3. Only approved posts are returned by search

Table Design:
    - post_thumbnail: the 600px-wide PNG produced on upload, stored inline
      as binary and served base64-encoded in search results
    - tutoring_course_id: the course being tutored; the major is reached
      through course.major
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    Text,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from tutormatch.database import Base


class TutorPost(Base):
    """
    A tutoring advertisement.

    Query Patterns:
        - Search: JOIN users, course, major WHERE admin_approved ORDER BY post_id
          → idx_tutor_post_approved narrows the scan to approved rows
    """

    __tablename__ = "tutor_post"

    post_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        comment="The tutor who owns this post",
    )

    post_created: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Set once the post has been fully created",
    )

    post_details: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Free-text description written by the tutor",
    )

    post_thumbnail: Mapped[Optional[bytes]] = mapped_column(
        LargeBinary,
        nullable=True,
        comment="Resized PNG thumbnail",
    )

    admin_approved: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Only approved posts are visible to search",
    )

    tutoring_course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("course.course_id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_tutor_post_approved", "admin_approved"),
    )

    def __repr__(self) -> str:
        return (
            f"<TutorPost(id={self.post_id}, user_id={self.user_id}, "
            f"course_id={self.tutoring_course_id}, approved={self.admin_approved})>"
        )
