"""
TutorMatch Backend: Dashboard Route Handler
=============================================

What:  GET /dashboard, the logged-in user's inbox.
How:   `require_user_id` takes the caller's identity from the session (or
       redirects to the login page); DashboardService loads the messages.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tutormatch.database import get_db_session
from tutormatch.schemas.common import ErrorResponse, SearchCategories
from tutormatch.schemas.dashboard import DashboardResponse
from tutormatch.services.dashboard_service import dashboard_service
from tutormatch.session import (
    clear_lazy_registration,
    load_search_categories,
    require_user_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"], dependencies=[Depends(clear_lazy_registration)])


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    responses={
        200: {"description": "Inbound messages, newest first", "model": DashboardResponse},
        303: {"description": "Not logged in; redirect to the login page"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Load the caller's message dashboard",
)
async def dashboard(
    user_id: int = Depends(require_user_id),
    categories: SearchCategories = Depends(load_search_categories),
    db: AsyncSession = Depends(get_db_session),
) -> DashboardResponse:
    data = await dashboard_service.load_dashboard(db=db, user_id=user_id)
    return DashboardResponse(categories=categories, dashboard=data)
