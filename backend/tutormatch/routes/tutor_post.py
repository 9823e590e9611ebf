"""
TutorMatch Backend: Tutor Post Route Handlers
===============================================

What:  GET /tutor-post (form data) and POST /tutor-post (create a post).

Request Flow (POST):
    1. Login gate: tutor id comes from the session (303 to login otherwise)
    2. Multipart fields: majorShortName, courseNumber, postInfo, postImage
    3. TutorPostService: validate → resolve major/course → thumbnail → insert
    4. 303 See Other to the site root

Error responses (handled by global exception handlers):
    HTTP 400: bad upload, unknown major/course, unreadable image
    HTTP 422: missing/ill-typed form fields (FastAPI validation)
    HTTP 500: database or storage failure
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.database import get_db_session
from tutormatch.schemas.common import ErrorResponse, SearchCategories
from tutormatch.schemas.tutor_post import TutorPostFormResponse
from tutormatch.services.tutor_post_service import tutor_post_service
from tutormatch.session import (
    clear_lazy_registration,
    load_search_categories,
    require_user_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tutor Posts"], dependencies=[Depends(clear_lazy_registration)])


@router.get(
    "/tutor-post",
    response_model=TutorPostFormResponse,
    responses={
        200: {"description": "Course options grouped by major", "model": TutorPostFormResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Data for the tutor-post creation form",
)
async def tutor_post_form(
    categories: SearchCategories = Depends(load_search_categories),
    db: AsyncSession = Depends(get_db_session),
) -> TutorPostFormResponse:
    course_data = await tutor_post_service.get_course_options(db)
    return TutorPostFormResponse(categories=categories, course_data=course_data)


@router.post(
    "/tutor-post",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Post created (or not logged in); redirect"},
        400: {"description": "Invalid form input or image", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a tutor post",
    description=(
        "Creates a tutor post for the logged-in user. The image (PNG or JPEG) is "
        "resized to a 600px-wide thumbnail. New posts wait for admin approval "
        "before they appear in search."
    ),
)
async def create_tutor_post(
    major_short_name: str = Form(..., alias="majorShortName", max_length=16),
    course_number: int = Form(..., alias="courseNumber", ge=0),
    post_details: str = Form("", alias="postInfo", max_length=5000),
    post_image: UploadFile = File(..., alias="postImage"),
    tutor_id: int = Depends(require_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    content = await post_image.read()

    logger.info(
        "Received tutor post from user %s: %s %s, image %s (%d bytes)",
        tutor_id,
        major_short_name,
        course_number,
        post_image.filename or "unknown",
        len(content),
    )

    try:
        await tutor_post_service.create_tutor_post(
            db=db,
            tutor_id=tutor_id,
            major_short_name=major_short_name,
            course_number=course_number,
            post_details=post_details,
            filename=post_image.filename or "upload.png",
            content=content,
        )
    finally:
        await post_image.close()

    return RedirectResponse(url="/", status_code=303)
