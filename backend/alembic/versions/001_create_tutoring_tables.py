"""Create tutoring marketplace tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `major`, `course`, `users`, `tutor_post` and `messages`.

Rollback: downgrade() drops all five tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "major",
        sa.Column("major_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "major_short_name",
            sa.String(16),
            nullable=False,
            comment="Unique department code, e.g. CSC",
        ),
        sa.Column(
            "major_long_name",
            sa.String(128),
            nullable=False,
            comment="Display name, e.g. Computer Science",
        ),
        sa.PrimaryKeyConstraint("major_id"),
        sa.UniqueConstraint("major_short_name"),
    )

    op.create_table(
        "course",
        sa.Column("course_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        # Legacy column name; holds a major_id
        sa.Column("major", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("course_id"),
        sa.ForeignKeyConstraint(["major"], ["major.major_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("major", "number", name="uq_course_major_number"),
    )

    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(64), nullable=False),
        sa.Column("last_name", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "tutor_post",
        sa.Column("post_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "user_id",
            sa.Integer(),
            nullable=False,
            comment="The tutor who owns this post",
        ),
        sa.Column(
            "post_created",
            sa.Boolean(),
            nullable=False,
            comment="Set once the post has been fully created",
        ),
        sa.Column(
            "post_details",
            sa.Text(),
            nullable=False,
            comment="Free-text description written by the tutor",
        ),
        sa.Column(
            "post_thumbnail",
            sa.LargeBinary(),
            nullable=True,
            comment="Resized PNG thumbnail",
        ),
        sa.Column(
            "admin_approved",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Only approved posts are visible to search",
        ),
        sa.Column("tutoring_course_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("post_id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["tutoring_course_id"], ["course.course_id"], ondelete="CASCADE"
        ),
    )
    op.create_index("idx_tutor_post_approved", "tutor_post", ["admin_approved"])

    op.create_table(
        "messages",
        sa.Column("message_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "date_sent",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("message_text", sa.Text(), nullable=False),
        sa.Column("to_user", sa.Integer(), nullable=False),
        sa.Column("from_user", sa.Integer(), nullable=False),
        sa.Column(
            "is_unread",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
        ),
        sa.PrimaryKeyConstraint("message_id"),
        sa.ForeignKeyConstraint(["to_user"], ["users.user_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["from_user"], ["users.user_id"], ondelete="CASCADE"),
    )

    # Dashboard query: WHERE to_user = ? ORDER BY date_sent DESC
    op.create_index(
        "idx_messages_to_user_date",
        "messages",
        ["to_user", sa.text("date_sent DESC")],
    )


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    op.drop_index("idx_messages_to_user_date", table_name="messages")
    op.drop_table("messages")
    op.drop_index("idx_tutor_post_approved", table_name="tutor_post")
    op.drop_table("tutor_post")
    op.drop_table("users")
    op.drop_table("course")
    op.drop_table("major")
