"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration creates the tables owned by the admin API:
1. users, user_sessions and password_resets for staff authentication
2. applicants and schedule_events
3. courses, phases, user_enrollments and user_phase_progress, read by the
   dashboard overview and phase progress endpoints

The per-program tables (iim_pgpmci_*, iim_phd_*, iim_ephd_*, iim_emba_*) belong
to the application portal and are not managed here.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(),
        server_default=sa.func.now(),
        nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    """Create all API-owned tables."""
    # ============================================
    # Authentication
    # ============================================
    op.create_table(
        "users",
        _id(),
        _created_at(),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_sessions",
        _id(),
        _created_at(),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token", sa.String(length=255), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_token", "user_sessions", ["token"])

    op.create_table(
        "password_resets",
        _id(),
        _created_at(),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token", sa.String(length=255), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_password_resets_user_id", "password_resets", ["user_id"])

    # ============================================
    # Applicants and schedule
    # ============================================
    op.create_table(
        "applicants",
        _id(),
        _created_at(),
        _updated_at(),
        sa.Column("applicant_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("program_applied_for", sa.String(length=20), nullable=True),
        sa.Column(
            "application_status",
            sa.String(length=30),
            server_default="under_review",
            nullable=False,
        ),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("source", sa.String(length=100), nullable=True),
        sa.Column("offer_issued", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("fee_paid", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("applied_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_applicants_applicant_id", "applicants", ["applicant_id"], unique=True)
    op.create_index("ix_applicants_program_applied_for", "applicants", ["program_applied_for"])
    op.create_index("ix_applicants_application_status", "applicants", ["application_status"])

    op.create_table(
        "schedule_events",
        _id(),
        _created_at(),
        _updated_at(),
        sa.Column("event_title", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(length=20), nullable=False),
        sa.Column("location", sa.String(length=255), server_default="", nullable=False),
        sa.Column("event_type", sa.String(length=50), server_default="meeting", nullable=False),
        sa.Column("program_id", sa.String(length=20), server_default="all", nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
    )
    op.create_index("ix_schedule_events_date", "schedule_events", ["date"])
    op.create_index("ix_schedule_events_program_id", "schedule_events", ["program_id"])

    # ============================================
    # Courses and phase progress
    # ============================================
    op.create_table(
        "courses",
        _id(),
        _created_at(),
        sa.Column("course_code", sa.String(length=20), nullable=False),
        sa.Column("course_name", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_courses_course_code", "courses", ["course_code"], unique=True)

    op.create_table(
        "phases",
        _id(),
        _created_at(),
        sa.Column(
            "course_id",
            sa.Integer(),
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("phase_name", sa.String(length=100), nullable=False),
        sa.Column("phase_order", sa.Integer(), nullable=False),
        sa.Column("commitment_fee", sa.Numeric(10, 2), server_default="0", nullable=False),
    )
    op.create_index("ix_phases_course_id", "phases", ["course_id"])

    op.create_table(
        "user_enrollments",
        _id(),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "course_id",
            sa.Integer(),
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=20), server_default="active", nullable=False),
        sa.Column("enrollment_date", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "course_id", name="uq_user_enrollments_user_course"),
    )

    op.create_table(
        "user_phase_progress",
        _id(),
        _updated_at(),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "phase_id",
            sa.Integer(),
            sa.ForeignKey("phases.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=30), server_default="not_started", nullable=False),
        sa.Column("progress_percentage", sa.Numeric(5, 2), server_default="0", nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("verified_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.UniqueConstraint("user_id", "phase_id", name="uq_user_phase_progress_user_phase"),
    )
    op.create_index("ix_user_phase_progress_phase_id", "user_phase_progress", ["phase_id"])


def downgrade() -> None:
    """Drop all API-owned tables."""
    op.drop_table("user_phase_progress")
    op.drop_table("user_enrollments")
    op.drop_table("phases")
    op.drop_table("courses")
    op.drop_table("schedule_events")
    op.drop_table("applicants")
    op.drop_table("password_resets")
    op.drop_table("user_sessions")
    op.drop_table("users")
