"""
TutorMatch Backend: Tutor Post Schemas
========================================

What:  View-models for the tutor-post form (GET /tutor-post) and the result
       of creating a post (POST /tutor-post).
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from tutormatch.schemas.common import SearchCategories


class CourseOption(BaseModel):
    """
    One entry of the course dropdown.

    Example: {"course_number": 648, "course_label": "CSC 648 Software Engineering"}
    """
    course_number: int
    course_label: str


class TutorPostFormResponse(BaseModel):
    """
    What:  Data for the post-creation form.

    `course_data` groups the course options by major short name, in major
    then course-number order:
        {"CSC": [CourseOption, ...], "MATH": [...]}
    """
    categories: SearchCategories
    course_data: Dict[str, List[CourseOption]] = Field(default_factory=dict)


class TutorPostCreated(BaseModel):
    """Returned by the service after a post row has been inserted."""
    post_id: int
    tutor_id: int
    course_id: int
    thumbnail_width: int
    thumbnail_height: int
    admin_approved: bool = Field(
        default=False,
        description="New posts wait for an administrator before appearing in search",
    )
