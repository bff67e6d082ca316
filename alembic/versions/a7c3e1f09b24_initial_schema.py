"""initial schema

Revision ID: a7c3e1f09b24
Revises:
Create Date: 2026-10-17 09:00:00.000000

This migration creates every table of the platform:
1. users, otp_codes, refresh_tokens (accounts and credentials)
2. classrooms, classroom_students, join_requests (membership)
3. lectures (self-referencing tree)
4. quizzes, quiz_question_groups, quiz_questions, quiz_options (authoring)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a7c3e1f09b24"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLE = sa.Enum("student", "admin", name="user_role")
OTP_PURPOSE = sa.Enum("email_verification", "password_reset", name="otp_purpose")
JOIN_REQUEST_STATUS = sa.Enum("pending", "approved", "rejected", name="join_request_status")
QUESTION_TYPE = sa.Enum("single_choice", "multiple_choice", "true_false", name="question_type")


def _timestamps() -> list[sa.Column]:
    """id, created_at and updated_at (from BaseModel)."""
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables."""
    # Accounts
    op.create_table(
        "users",
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("avatar_media_id", sa.Integer(), nullable=True),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("phone_number", name=op.f("uq_users_phone_number")),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "otp_codes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=12), nullable=False),
        sa.Column("purpose", OTP_PURPOSE, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_otp_codes")),
    )
    op.create_index("ix_otp_codes_email_purpose", "otp_codes", ["email", "purpose"])
    op.create_index(op.f("ix_otp_codes_expires_at"), "otp_codes", ["expires_at"])

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_refresh_tokens_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_refresh_tokens")),
    )
    op.create_index(
        op.f("ix_refresh_tokens_token_hash"), "refresh_tokens", ["token_hash"], unique=True
    )
    op.create_index(op.f("ix_refresh_tokens_user_id"), "refresh_tokens", ["user_id"])
    op.create_index(op.f("ix_refresh_tokens_expires_at"), "refresh_tokens", ["expires_at"])

    # Membership
    op.create_table(
        "classrooms",
        *_timestamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_classrooms")),
        sa.UniqueConstraint("name", name=op.f("uq_classrooms_name")),
    )
    op.create_index(op.f("ix_classrooms_deleted_at"), "classrooms", ["deleted_at"])

    op.create_table(
        "classroom_students",
        *_timestamps(),
        sa.Column("classroom_id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["classroom_id"],
            ["classrooms.id"],
            name=op.f("fk_classroom_students_classroom_id_classrooms"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["users.id"],
            name=op.f("fk_classroom_students_student_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_classroom_students")),
        sa.UniqueConstraint(
            "classroom_id", "student_id", name=op.f("uq_classroom_students_classroom_id")
        ),
    )
    op.create_index(
        op.f("ix_classroom_students_classroom_id"), "classroom_students", ["classroom_id"]
    )
    op.create_index(op.f("ix_classroom_students_student_id"), "classroom_students", ["student_id"])
    op.create_index(op.f("ix_classroom_students_deleted_at"), "classroom_students", ["deleted_at"])

    op.create_table(
        "join_requests",
        *_timestamps(),
        sa.Column("classroom_id", sa.Integer(), nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("status", JOIN_REQUEST_STATUS, nullable=False),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("handled_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["classroom_id"],
            ["classrooms.id"],
            name=op.f("fk_join_requests_classroom_id_classrooms"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["users.id"],
            name=op.f("fk_join_requests_student_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_join_requests")),
        sa.UniqueConstraint("classroom_id", "student_id", name=op.f("uq_join_requests_classroom_id")),
    )
    op.create_index(op.f("ix_join_requests_classroom_id"), "join_requests", ["classroom_id"])
    op.create_index(op.f("ix_join_requests_student_id"), "join_requests", ["student_id"])

    # Lectures
    op.create_table(
        "lectures",
        *_timestamps(),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("media_id", sa.Integer(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["lectures.id"],
            name=op.f("fk_lectures_parent_id_lectures"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lectures")),
    )
    op.create_index(op.f("ix_lectures_parent_id"), "lectures", ["parent_id"])
    op.create_index(op.f("ix_lectures_deleted_at"), "lectures", ["deleted_at"])

    # Quizzes
    op.create_table(
        "quizzes",
        *_timestamps(),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("time_limit_minutes", sa.Integer(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_quizzes")),
    )
    op.create_index(op.f("ix_quizzes_deleted_at"), "quizzes", ["deleted_at"])

    op.create_table(
        "quiz_question_groups",
        *_timestamps(),
        sa.Column("quiz_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=True),
        sa.Column("intro_text", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("shuffle_inside", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["quiz_id"],
            ["quizzes.id"],
            name=op.f("fk_quiz_question_groups_quiz_id_quizzes"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_quiz_question_groups")),
    )
    op.create_index(op.f("ix_quiz_question_groups_quiz_id"), "quiz_question_groups", ["quiz_id"])

    op.create_table(
        "quiz_questions",
        *_timestamps(),
        sa.Column("quiz_id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.Column("question_type", QUESTION_TYPE, nullable=False),
        sa.Column("points", sa.Float(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["quiz_id"],
            ["quizzes.id"],
            name=op.f("fk_quiz_questions_quiz_id_quizzes"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["quiz_question_groups.id"],
            name=op.f("fk_quiz_questions_group_id_quiz_question_groups"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_quiz_questions")),
    )
    op.create_index(op.f("ix_quiz_questions_quiz_id"), "quiz_questions", ["quiz_id"])
    op.create_index(op.f("ix_quiz_questions_group_id"), "quiz_questions", ["group_id"])

    op.create_table(
        "quiz_options",
        *_timestamps(),
        sa.Column("question_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["question_id"],
            ["quiz_questions.id"],
            name=op.f("fk_quiz_options_question_id_quiz_questions"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_quiz_options")),
    )
    op.create_index(op.f("ix_quiz_options_question_id"), "quiz_options", ["question_id"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("quiz_options")
    op.drop_table("quiz_questions")
    op.drop_table("quiz_question_groups")
    op.drop_table("quizzes")
    op.drop_table("lectures")
    op.drop_table("join_requests")
    op.drop_table("classroom_students")
    op.drop_table("classrooms")
    op.drop_table("refresh_tokens")
    op.drop_table("otp_codes")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (QUESTION_TYPE, JOIN_REQUEST_STATUS, OTP_PURPOSE, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
