"""
TutorMatch Backend: Tutor Post Service Unit Tests
===================================================

What:  Tests for the tutor-post creation workflow and the course options.
How:   Real Pillow images against the seeded in-memory database.

What we test:
    ✅ Successful creation: 600px thumbnail, unapproved, hidden from search
    ✅ Unknown major / course rejected before any file is written
    ✅ Temporary upload file removed after success and after failure
    ✅ Course options grouped by major with display labels
    ✅ Database failure during insert → DatabaseError
"""

from io import BytesIO
from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tutormatch.exceptions import DatabaseError, ValidationError
from tutormatch.models import TutorPost
from tutormatch.services.search_service import SearchService
from tutormatch.services.tutor_post_service import TutorPostService, course_label


def test_course_label_uppercases_major():
    assert course_label("csc", 648, "Software Engineering") == "CSC 648 Software Engineering"


class TestCreateTutorPost:

    def setup_method(self):
        self.service = TutorPostService()

    @pytest.mark.asyncio
    async def test_creates_unapproved_post_with_thumbnail(self, db_session, png_bytes):
        created = await self.service.create_tutor_post(
            db=db_session,
            tutor_id=4,
            major_short_name="CSC",
            course_number=413,
            post_details="  Weekly review sessions  ",
            filename="whiteboard.png",
            content=png_bytes,
        )

        assert created.tutor_id == 4
        assert created.course_id == 2
        assert (created.thumbnail_width, created.thumbnail_height) == (600, 400)
        assert created.admin_approved is False

        post = (
            await db_session.execute(select(TutorPost).where(TutorPost.post_id == created.post_id))
        ).scalar_one()
        assert post.post_created is True
        assert post.post_details == "Weekly review sessions"
        with Image.open(BytesIO(post.post_thumbnail)) as img:
            assert img.format == "PNG"
            assert img.size == (600, 400)

    @pytest.mark.asyncio
    async def test_new_post_is_not_searchable_until_approved(self, db_session, png_bytes):
        await self.service.create_tutor_post(
            db=db_session,
            tutor_id=4,
            major_short_name="MATH",
            course_number=226,
            post_details="Derivatives and limits",
            filename="calc.png",
            content=png_bytes,
        )

        page = await SearchService(page_size=5).search(db_session, category="MATH")
        assert page.total_count == 2

    @pytest.mark.asyncio
    async def test_temp_file_removed_after_success(self, db_session, png_bytes, storage_files):
        await self.service.create_tutor_post(
            db=db_session,
            tutor_id=4,
            major_short_name="CSC",
            course_number=648,
            post_details="",
            filename="photo.png",
            content=png_bytes,
        )

        assert storage_files() == []

    @pytest.mark.asyncio
    async def test_temp_file_removed_after_bad_image(self, db_session, storage_files):
        with pytest.raises(ValidationError):
            await self.service.create_tutor_post(
                db=db_session,
                tutor_id=4,
                major_short_name="CSC",
                course_number=648,
                post_details="",
                filename="photo.png",
                content=b"this is not a png",
            )

        assert storage_files() == []

    @pytest.mark.asyncio
    async def test_unknown_major_rejected(self, db_session, png_bytes):
        with patch("tutormatch.services.tutor_post_service.file_service.store_file") as store:
            with pytest.raises(ValidationError, match="Unknown major") as exc_info:
                await self.service.create_tutor_post(
                    db=db_session,
                    tutor_id=4,
                    major_short_name="BIO",
                    course_number=100,
                    post_details="",
                    filename="photo.png",
                    content=png_bytes,
                )
            store.assert_not_called()
        assert exc_info.value.field == "majorShortName"

    @pytest.mark.asyncio
    async def test_unknown_course_rejected(self, db_session, png_bytes):
        with pytest.raises(ValidationError, match="not a known course") as exc_info:
            await self.service.create_tutor_post(
                db=db_session,
                tutor_id=4,
                major_short_name="CSC",
                course_number=226,
                post_details="",
                filename="photo.png",
                content=png_bytes,
            )
        assert exc_info.value.field == "courseNumber"

    @pytest.mark.asyncio
    async def test_unsupported_extension_rejected(self, db_session, png_bytes):
        with pytest.raises(ValidationError, match="not supported"):
            await self.service.create_tutor_post(
                db=db_session,
                tutor_id=4,
                major_short_name="CSC",
                course_number=648,
                post_details="",
                filename="photo.gif",
                content=png_bytes,
            )

    @pytest.mark.asyncio
    async def test_insert_failure_raises_database_error(self, db_session, png_bytes, storage_files):
        with patch.object(
            db_session,
            "flush",
            AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("fk violation"))),
        ):
            with pytest.raises(DatabaseError):
                await self.service.create_tutor_post(
                    db=db_session,
                    tutor_id=4,
                    major_short_name="CSC",
                    course_number=648,
                    post_details="",
                    filename="photo.png",
                    content=png_bytes,
                )

        assert storage_files() == []


class TestCourseOptions:

    def setup_method(self):
        self.service = TutorPostService()

    @pytest.mark.asyncio
    async def test_grouped_by_major_in_display_order(self, db_session):
        options = await self.service.get_course_options(db_session)

        assert list(options) == ["CSC", "MATH"]
        assert [o.course_number for o in options["CSC"]] == [413, 648]
        assert options["CSC"][1].course_label == "CSC 648 Software Engineering"
        assert options["MATH"][0].course_label == "MATH 226 Calculus I"
