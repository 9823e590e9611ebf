"""
TutorMatch Backend: Search Route Handler
==========================================

What:  GET /search (also served at the site root).
How:   Extracts the query parameters, delegates to SearchService, returns the
       page view-model together with the header categories.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.database import get_db_session
from tutormatch.schemas.common import ErrorResponse, SearchCategories
from tutormatch.schemas.search import SearchPageResponse
from tutormatch.services.search_service import search_service
from tutormatch.session import clear_lazy_registration, load_search_categories

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Search"], dependencies=[Depends(clear_lazy_registration)])


@router.get("/", response_model=SearchPageResponse, include_in_schema=False)
@router.get(
    "/search",
    response_model=SearchPageResponse,
    responses={
        200: {"description": "One page of approved tutor posts", "model": SearchPageResponse},
        400: {"description": "Unknown category", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Search approved tutor posts",
    description=(
        "Filters approved tutor posts by tutor name (case-insensitive substring) "
        "or by category (major short name). A name search ignores the category. "
        "Results come 5 per page."
    ),
)
async def search(
    response: Response,
    search: Optional[str] = Query(
        default=None,
        max_length=100,
        description="Matched against tutor first and last names",
    ),
    category: Optional[str] = Query(
        default=None,
        max_length=16,
        description="Major short name, e.g. CSC",
    ),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    categories: SearchCategories = Depends(load_search_categories),
    db: AsyncSession = Depends(get_db_session),
) -> SearchPageResponse:
    """
    Example client usage (pager):
        Page 1: GET /search?category=CSC
        Page 3: GET /search?category=CSC&page=3
        A page past the end returns an empty `results` list, not an error.
    """
    result = await search_service.search(
        db=db,
        search_term=search,
        category=category,
        page=page,
    )

    response.headers["X-Total-Count"] = str(result.total_count)

    return SearchPageResponse(categories=categories, search=result)
