"""
TutorMatch Backend: Session Dependencies
==========================================

What:  Reusable route dependencies around the signed session cookie.
How:   Starlette's SessionMiddleware (itsdangerous-signed cookie, installed in
       main.py) exposes `request.session` as a dict. The login flow, which
       lives outside this service, stores `user_id` there.

Dependencies:
    clear_lazy_registration: drops an abandoned sign-up marker; runs on every page
    get_session_user_id:     the logged-in user's id, or None
    require_user_id:         the logged-in user's id, or a 303 redirect to login
    load_search_categories:  header categories for every page view-model
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.config import settings
from tutormatch.database import get_db_session
from tutormatch.exceptions import AuthenticationRequiredError
from tutormatch.schemas.common import SearchCategories
from tutormatch.services.category_service import category_service

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
LAZY_REGISTRATION_KEY = "lazy_registration"


def clear_lazy_registration(request: Request) -> None:
    """
    Remove the incomplete-registration marker from the session.

    The registration flow parks partially entered sign-up data in the session;
    navigating to any other page abandons it.
    """
    if request.session.pop(LAZY_REGISTRATION_KEY, None) is not None:
        logger.debug("Cleared lazy registration data from session")


def get_session_user_id(request: Request) -> Optional[int]:
    """The authenticated user's id, or None when nobody is logged in."""
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    try:
        return int(user_id)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed user id in session: %r", user_id)
        return None


def require_user_id(user_id: Optional[int] = Depends(get_session_user_id)) -> int:
    """
    Login gate for pages that need an identity.

    Raises:
        AuthenticationRequiredError: handled globally as a 303 to the login page
    """
    if user_id is None:
        raise AuthenticationRequiredError(login_url=settings.login_url)
    return user_id


async def load_search_categories(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> SearchCategories:
    """
    Load the header categories and keep them on request.state as well,
    so anything later in the request can reuse them without another query.
    """
    categories = await category_service.get_search_categories(db)
    request.state.search_categories = categories
    return categories
