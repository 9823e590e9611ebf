"""
TutorMatch Backend: Search Schemas
====================================

What:  View-models for GET /search.

Pagination model:
    The pager UI shows "Showing 11-12 of 12". The service computes:
        lower_bound = page_index * page_size + 1          (0 when total_count == 0)
        upper_bound = min(lower_bound + page_size - 1, total_count)
    A page past the end simply yields an empty `results` list; it is not an error.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from tutormatch.schemas.common import SearchCategories


class TutorPostResult(BaseModel):
    """One approved tutor post as shown in the search result list."""
    post_id: int
    tutor_id: int = Field(description="users.user_id of the tutor")
    first_name: str
    last_name: str
    course_id: int
    course_number: int
    course_title: str
    major_short_name: str
    major_long_name: str
    thumbnail: Optional[str] = Field(
        default=None,
        description="Base64-encoded PNG thumbnail, null when the post has none",
    )


class SearchResultPage(BaseModel):
    """
    What:  A single 5-item window over all matching approved posts.

    `search_term` and `category` echo the (normalized) filters back so the
    search form can be re-populated.
    """
    results: List[TutorPostResult] = Field(default_factory=list)
    search_term: str = Field(default="", description="Free-text filter, empty when absent")
    category: str = Field(default="", description="Major short name filter, empty when absent")
    page: int = Field(default=1, description="1-based page number")
    page_index: int = Field(default=0, description="0-based page index (page - 1)")
    page_size: int = Field(default=5)
    total_count: int = Field(default=0, description="Number of matches across all pages")
    total_pages: int = Field(default=0)
    lower_bound: int = Field(default=0, description="1-based index of the first item on this page")
    upper_bound: int = Field(default=0, description="1-based index of the last item on this page")


class SearchPageResponse(BaseModel):
    """Everything the search page needs: header categories plus the result window."""
    categories: SearchCategories
    search: SearchResultPage
