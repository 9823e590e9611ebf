"""
TutorMatch Backend: Tutor Post Service
========================================

What:  Everything behind the tutor-post form: the course dropdown data and
       the creation workflow.
Who:   Called by GET /tutor-post and POST /tutor-post.

Creation Flow (POST /tutor-post):
    ┌──────────┐   ┌─────────────┐   ┌──────────────┐   ┌────────────┐   ┌──────────┐
    │ Validate │──▶│ Resolve     │──▶│ Resolve      │──▶│ Thumbnail  │──▶│ Insert   │
    │ upload   │   │ major id    │   │ course id    │   │ (temp file)│   │ post row │
    └──────────┘   └─────────────┘   └──────────────┘   └────────────┘   └──────────┘

    Lookups run before the image work so bad form input is rejected cheaply.
    The temporary image file is removed on every exit path.

    On failure:
    - Bad upload / unknown major or course / undecodable image → ValidationError (400)
    - Database failure at any step → DatabaseError (500)
    - Temp file write failure → FileStorageError (500)
"""

import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.exceptions import DatabaseError, ValidationError
from tutormatch.models import Course, Major, TutorPost
from tutormatch.schemas.tutor_post import CourseOption, TutorPostCreated
from tutormatch.services.file_service import file_service
from tutormatch.services.image_service import image_service

logger = logging.getLogger(__name__)


def course_label(major_short_name: str, course_number: int, course_title: str) -> str:
    """'csc', 648, 'Software Engineering' → 'CSC 648 Software Engineering'"""
    return f"{major_short_name.upper()} {course_number} {course_title}"


class TutorPostService:

    async def get_course_options(self, db: AsyncSession) -> Dict[str, List[CourseOption]]:
        """
        Course dropdown data grouped by major short name.

        Ordered by major, then course number, so the dict and each list come
        out in display order.

        Raises:
            DatabaseError: Query execution failed
        """
        stmt = (
            select(Course.number, Course.title, Major.major_short_name)
            .join(Major, Course.major_id == Major.major_id)
            .order_by(Course.major_id, Course.number)
        )
        try:
            rows = (await db.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database error loading course options: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load the course list. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        course_data: Dict[str, List[CourseOption]] = {}
        for row in rows:
            course_data.setdefault(row.major_short_name, []).append(
                CourseOption(
                    course_number=row.number,
                    course_label=course_label(row.major_short_name, row.number, row.title),
                )
            )
        return course_data

    async def _resolve_major_id(self, db: AsyncSession, major_short_name: str) -> int:
        result = await db.execute(
            select(Major.major_id).where(Major.major_short_name == major_short_name)
        )
        major_id = result.scalar_one_or_none()
        if major_id is None:
            raise ValidationError(
                message=f"Unknown major '{major_short_name}'.",
                field="majorShortName",
                context={"major_short_name": major_short_name},
            )
        return major_id

    async def _resolve_course_id(
        self, db: AsyncSession, major_id: int, major_short_name: str, course_number: int
    ) -> int:
        result = await db.execute(
            select(Course.course_id).where(
                Course.major_id == major_id,
                Course.number == course_number,
            )
        )
        course_id = result.scalar_one_or_none()
        if course_id is None:
            raise ValidationError(
                message=f"{major_short_name.upper()} {course_number} is not a known course.",
                field="courseNumber",
                context={"major_short_name": major_short_name, "course_number": course_number},
            )
        return course_id

    async def create_tutor_post(
        self,
        db: AsyncSession,
        tutor_id: int,
        major_short_name: str,
        course_number: int,
        post_details: str,
        filename: str,
        content: bytes,
    ) -> TutorPostCreated:
        """
        Create an (unapproved) tutor post with a resized thumbnail.

        Args:
            db: Async database session (commit happens in get_db_session)
            tutor_id: The authenticated user creating the post
            major_short_name: Major of the tutored course, e.g. "CSC"
            course_number: Course number within that major, e.g. 648
            post_details: Free text written by the tutor
            filename: Original upload filename (extension check only)
            content: Raw upload bytes

        Returns:
            TutorPostCreated describing the inserted row

        Raises:
            ValidationError: Bad upload, unknown major/course, undecodable image
            FileStorageError: Temporary file could not be written
            DatabaseError: Lookup or insert failed
        """
        major_short_name = major_short_name.strip()
        extension = file_service.validate_upload(filename, content)

        try:
            major_id = await self._resolve_major_id(db, major_short_name)
            course_id = await self._resolve_course_id(
                db, major_id, major_short_name, course_number
            )

            async with file_service.scoped_temp_file(content, extension) as temp_path:
                thumbnail = await image_service.make_thumbnail(temp_path)

            post = TutorPost(
                user_id=tutor_id,
                post_created=True,
                post_details=post_details.strip(),
                post_thumbnail=thumbnail.data,
                admin_approved=False,
                tutoring_course_id=course_id,
            )
            db.add(post)
            await db.flush()  # Assigns post_id without committing

        except (SQLAlchemyError, OSError) as e:
            logger.error("Database error creating tutor post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save your tutor post. Please try again.",
                context={"error_type": type(e).__name__, "tutor_id": tutor_id},
            ) from e

        logger.info(
            "Tutor post %s created by user %s for course %s (pending approval)",
            post.post_id,
            tutor_id,
            course_id,
        )
        return TutorPostCreated(
            post_id=post.post_id,
            tutor_id=tutor_id,
            course_id=course_id,
            thumbnail_width=thumbnail.width,
            thumbnail_height=thumbnail.height,
            admin_approved=post.admin_approved,
        )


tutor_post_service = TutorPostService()
