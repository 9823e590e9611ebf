"""
TutorMatch Backend: Dashboard Schemas
=======================================

What:  View-models for GET /dashboard (the caller's inbox).
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from tutormatch.schemas.common import SearchCategories


class MessageEntry(BaseModel):
    """
    What:  One inbound message, display-ready.

    `status` is derived from that message's own unread flag:
    "Unread" or "Read".
    """
    message_id: int
    sender_id: int
    sender_name: str = Field(description="Sender's first and last name")
    message_text: str
    date_time: datetime = Field(description="When the message was sent")
    status: str = Field(description="Unread or Read")


class DashboardData(BaseModel):
    messages: List[MessageEntry] = Field(default_factory=list, description="Newest first")
    unread_count: int = 0


class DashboardResponse(BaseModel):
    categories: SearchCategories
    dashboard: DashboardData
