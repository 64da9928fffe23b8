"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "role_assignments",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.UniqueConstraint("user_id", "role", name="uq_role_assignments_user_role"),
    )
    op.create_index("ix_role_assignments_user_id", "role_assignments", ["user_id"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("picture", sa.String(2048), nullable=True),
        sa.Column("course_interests", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("path", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_courses_name", "courses", ["name"], unique=True)
    op.create_index("ix_courses_path", "courses", ["path"])

    op.create_table(
        "projects",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("homepage", sa.String(2048), nullable=True),
        sa.Column("picture", sa.String(2048), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_projects_name", "projects", ["name"], unique=True)

    op.create_table(
        "profile_interests",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "profile_email", sa.String(255),
            sa.ForeignKey("profiles.email", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("interest", sa.String(100), nullable=False),
        sa.UniqueConstraint("profile_email", "interest", name="uq_profile_interests_pair"),
    )
    op.create_index("ix_profile_interests_profile_email", "profile_interests", ["profile_email"])

    op.create_table(
        "profile_projects",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "profile_email", sa.String(255),
            sa.ForeignKey("profiles.email", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "project_name", sa.String(255),
            sa.ForeignKey("projects.name", ondelete="CASCADE"), nullable=False,
        ),
        sa.UniqueConstraint("profile_email", "project_name", name="uq_profile_projects_pair"),
    )
    op.create_index("ix_profile_projects_profile_email", "profile_projects", ["profile_email"])
    op.create_index("ix_profile_projects_project_name", "profile_projects", ["project_name"])

    op.create_table(
        "project_interests",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "project_name", sa.String(255),
            sa.ForeignKey("projects.name", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("interest", sa.String(100), nullable=False),
        sa.UniqueConstraint("project_name", "interest", name="uq_project_interests_pair"),
    )
    op.create_index("ix_project_interests_project_name", "project_interests", ["project_name"])

    op.create_table(
        "notes",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "course", sa.String(255),
            sa.ForeignKey("courses.name", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column(
            "owner", sa.String(255),
            sa.ForeignKey("profiles.email", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column("image", sa.String(2048), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_notes_title", "notes", ["title"])
    op.create_index("ix_notes_course", "notes", ["course"])
    op.create_index("ix_notes_owner", "notes", ["owner"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("note_id", sa.String(), sa.ForeignKey("notes.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "owner", sa.String(255),
            sa.ForeignKey("profiles.email", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("rating", sa.Float(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("note_id", "owner", name="uq_ratings_note_owner"),
    )
    op.create_index("ix_ratings_note_id", "ratings", ["note_id"])
    op.create_index("ix_ratings_owner", "ratings", ["owner"])

    op.create_table(
        "rating_summaries",
        sa.Column(
            "note_id", sa.String(),
            sa.ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("stars", sa.Float(), nullable=False),
        sa.Column("num_users", sa.Integer(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("rating_summaries")
    op.drop_table("ratings")
    op.drop_table("notes")
    op.drop_table("project_interests")
    op.drop_table("profile_projects")
    op.drop_table("profile_interests")
    op.drop_table("projects")
    op.drop_table("courses")
    op.drop_table("profiles")
    op.drop_table("role_assignments")
    op.drop_table("users")
