"""
TutorMatch Backend: ORM Models
================================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and by the test suite's `create_all`).
"""

from tutormatch.models.catalog import Course, Major
from tutormatch.models.message import Message
from tutormatch.models.tutor_post import TutorPost
from tutormatch.models.user import User

__all__ = ["Course", "Major", "Message", "TutorPost", "User"]
