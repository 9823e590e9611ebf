"""
TutorMatch Backend: Major and Course Models
=============================================

What:  Reference tables for the academic catalog (`major`, `course`).
Who:   Read by the category loader, search, and the tutor-post form.
       Never written by the request handlers.

Query Patterns:
    - Search categories:  SELECT * FROM major ORDER BY major_short_name
    - Major lookup:       WHERE major_short_name = :short_name  (unique index)
    - Course lookup:      WHERE major = :major_id AND number = :number  (unique index)
"""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tutormatch.database import Base


class Major(Base):
    """An academic department/program, e.g. CSC / Computer Science."""

    __tablename__ = "major"

    major_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Short code shown in the category dropdown and matched exactly by search
    major_short_name: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        unique=True,
        comment="Unique department code, e.g. CSC",
    )

    major_long_name: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="Display name, e.g. Computer Science",
    )

    def __repr__(self) -> str:
        return f"<Major(id={self.major_id}, short_name='{self.major_short_name}')>"


class Course(Base):
    """A numbered course owned by a major (CSC 648 Software Engineering)."""

    __tablename__ = "course"

    course_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Column keeps the legacy name `major`; the attribute name says what it holds
    major_id: Mapped[int] = mapped_column(
        "major",
        Integer,
        ForeignKey("major.major_id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("major", "number", name="uq_course_major_number"),
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.course_id}, major={self.major_id}, number={self.number})>"
