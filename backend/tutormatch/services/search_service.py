"""
TutorMatch Backend: Search Service
====================================

What:  Filtered, paginated search over approved tutor posts.
Who:   Called by GET /search (and the site root).

Filter Variants (all require tutor_post.admin_approved):
    term  category   WHERE ...
    ────  ────────   ─────────────────────────────────────────────────────
     -       -       (no extra filter: every approved post)
     ✓       -       first_name ILIKE %term% OR last_name ILIKE %term%
     -       ✓       major.major_short_name = :category
     ✓       ✓       name match only; the category is echoed but not applied

    Every value is a bound parameter. LIKE wildcards typed by the user
    (% and _) are escaped, so "50%" matches the literal text "50%".

Pagination:
    The 5-item window is pushed into the query (ORDER BY post_id OFFSET/LIMIT)
    and a separate COUNT(*) gives the total, so only one page of thumbnails
    is ever loaded. Results are ordered by post_id to keep pages stable.
"""

import base64
import logging
import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.config import settings
from tutormatch.exceptions import DatabaseError, ValidationError
from tutormatch.models import Course, Major, TutorPost, User
from tutormatch.schemas.search import SearchResultPage, TutorPostResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageWindow:
    """
    Bounds of one pager page over `total_count` items.

    For page index p, size s and total n:
        offset      = p * s
        upper_bound = min(p*s + s, n)
        lower_bound = p*s + 1, or 0 when n == 0

    An index past the last page gives lower_bound > upper_bound and an empty
    window; callers clamp rather than treat it as an error.
    """
    page_index: int
    page_size: int
    total_count: int

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    @property
    def lower_bound(self) -> int:
        if self.total_count == 0:
            return 0
        return self.offset + 1

    @property
    def upper_bound(self) -> int:
        return min(self.offset + self.page_size, self.total_count)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip()


def _encode_thumbnail(data: Optional[bytes]) -> Optional[str]:
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")


class SearchService:
    """
    Business logic for tutor-post search.

    Error Handling Strategy:
        Unknown category → ValidationError (400).
        Any database failure → DatabaseError (500, generic message).
    """

    def __init__(self, page_size: Optional[int] = None):
        self.page_size = page_size or settings.page_size

    def _filtered(self, stmt: Select, search_term: str, category: str) -> Select:
        """Apply the joins and WHERE clauses shared by the count and page queries."""
        stmt = (
            stmt.select_from(TutorPost)
            .join(User, TutorPost.user_id == User.user_id)
            .join(Course, TutorPost.tutoring_course_id == Course.course_id)
            .join(Major, Course.major_id == Major.major_id)
            .where(TutorPost.admin_approved.is_(True))
        )
        if search_term:
            stmt = stmt.where(
                or_(
                    User.first_name.icontains(search_term, autoescape=True),
                    User.last_name.icontains(search_term, autoescape=True),
                )
            )
        elif category:
            stmt = stmt.where(Major.major_short_name == category)
        return stmt

    async def _ensure_category_exists(self, db: AsyncSession, category: str) -> None:
        result = await db.execute(
            select(Major.major_id).where(Major.major_short_name == category)
        )
        if result.scalar_one_or_none() is None:
            raise ValidationError(
                message=f"Unknown category '{category}'.",
                field="category",
                context={"category": category},
            )

    async def search(
        self,
        db: AsyncSession,
        search_term: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
    ) -> SearchResultPage:
        """
        Run a search and return one page of results.

        Args:
            db: Async database session
            search_term: Free text matched against tutor first/last names
            category: Major short name, matched exactly; ignored when a term is given
            page: 1-based page number (default 1)

        Returns:
            SearchResultPage with the window, echoed filters and pager bounds

        Raises:
            ValidationError: page < 1, or unknown category without a term
            DatabaseError: Query execution failed
        """
        if page < 1:
            raise ValidationError(
                message="Page numbers start at 1.",
                field="page",
                context={"page": page},
            )

        search_term = _normalize(search_term)
        category = _normalize(category)
        page_index = page - 1

        try:
            # A name search ignores the category filter, so only a lone category is checked
            if category and not search_term:
                await self._ensure_category_exists(db, category)

            count_stmt = self._filtered(
                select(func.count(TutorPost.post_id)), search_term, category
            )
            total_count = (await db.execute(count_stmt)).scalar() or 0

            window = PageWindow(
                page_index=page_index,
                page_size=self.page_size,
                total_count=total_count,
            )

            rows = []
            # Past the last page: nothing to fetch, and the offset may not fit a DB integer
            if window.offset < total_count:
                rows_stmt = (
                    self._filtered(
                        select(
                            TutorPost.post_id,
                            TutorPost.user_id,
                            TutorPost.post_thumbnail,
                            TutorPost.tutoring_course_id,
                            User.first_name,
                            User.last_name,
                            Course.number,
                            Course.title,
                            Major.major_short_name,
                            Major.major_long_name,
                        ),
                        search_term,
                        category,
                    )
                    .order_by(TutorPost.post_id)
                    .offset(window.offset)
                    .limit(self.page_size)
                )
                rows = (await db.execute(rows_stmt)).all()

        except ValidationError:
            raise
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database error during search: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not run the search. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        results = [
            TutorPostResult(
                post_id=row.post_id,
                tutor_id=row.user_id,
                first_name=row.first_name,
                last_name=row.last_name,
                course_id=row.tutoring_course_id,
                course_number=row.number,
                course_title=row.title,
                major_short_name=row.major_short_name,
                major_long_name=row.major_long_name,
                thumbnail=_encode_thumbnail(row.post_thumbnail),
            )
            for row in rows
        ]

        logger.info(
            "Search term=%r category=%r page=%d: %d of %d results",
            search_term,
            category,
            page,
            len(results),
            total_count,
        )

        return SearchResultPage(
            results=results,
            search_term=search_term,
            category=category,
            page=page,
            page_index=page_index,
            page_size=self.page_size,
            total_count=total_count,
            total_pages=window.total_pages,
            lower_bound=window.lower_bound,
            upper_bound=window.upper_bound,
        )


search_service = SearchService()
