"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-01-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


user_role_enum = sa.Enum("TEACHER", "SUPER_ADMIN", name="user_role")
exam_type_enum = sa.Enum("TYT", "AYT", name="exam_type")
lesson_color_enum = sa.Enum("blue", "purple", "green", "emerald", "orange", "red", "gray", name="lesson_color")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=True),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("subscription_end_date", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "students",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("password", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("parent_name", sa.String(), nullable=True),
        sa.Column("parent_phone", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("teacher_id", sa.String(length=32), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_students_email", "students", ["email"], unique=True)
    op.create_index("ix_students_teacher_id", "students", ["teacher_id"])

    op.create_table(
        "lessons",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("lesson_group", sa.String(), nullable=False),
        sa.Column("lesson_exam_type", exam_type_enum, nullable=False),
        sa.Column("lesson_subject", sa.String(), nullable=True),
        sa.Column("color", lesson_color_enum, nullable=False),
        sa.Column("teacher_id", sa.String(length=32), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_lessons_teacher_id", "lessons", ["teacher_id"])

    op.create_table(
        "lesson_topics",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("lesson_topic_name", sa.String(), nullable=False),
        sa.Column("lesson_topic_order", sa.Integer(), nullable=False),
        sa.Column("lesson_id", sa.String(length=32), sa.ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_lesson_topics_lesson_id", "lesson_topics", ["lesson_id"])

    op.create_table(
        "resources",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("resource_name", sa.String(), nullable=False),
        sa.Column("resource_description", sa.Text(), nullable=True),
        sa.Column("teacher_id", sa.String(length=32), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_resources_teacher_id", "resources", ["teacher_id"])

    op.create_table(
        "resource_lessons",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("resource_id", sa.String(length=32), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column("lesson_id", sa.String(length=32), sa.ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("resource_id", "lesson_id", name="uq_resource_lesson"),
    )

    op.create_table(
        "resource_topics",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "resource_lesson_id",
            sa.String(length=32),
            sa.ForeignKey("resource_lessons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("resource_id", sa.String(length=32), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "lesson_topic_id",
            sa.String(length=32),
            sa.ForeignKey("lesson_topics.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_count", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("resource_id", "lesson_topic_id", name="uq_resource_topic"),
    )
    op.create_index("ix_resource_topics_lesson_topic_id", "resource_topics", ["lesson_topic_id"])

    op.create_table(
        "student_assignments",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("student_id", sa.String(length=32), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "lesson_topic_id",
            sa.String(length=32),
            sa.ForeignKey("lesson_topics.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assigned_at", sa.DateTime(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("student_assignment_completed_at", sa.DateTime(), nullable=True),
        sa.Column("question_counts", sa.JSON(), nullable=True),
        sa.UniqueConstraint("student_id", "lesson_topic_id", name="uq_student_topic"),
    )
    op.create_index("ix_student_assignments_student_id", "student_assignments", ["student_id"])

    op.create_table(
        "student_progress",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("student_id", sa.String(length=32), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "student_assignment_id",
            sa.String(length=32),
            sa.ForeignKey("student_assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("resource_id", sa.String(length=32), sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "lesson_topic_id",
            sa.String(length=32),
            sa.ForeignKey("lesson_topics.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("solved_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("correct_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("wrong_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("empty_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_count", sa.Integer(), nullable=True),
        sa.Column("last_solved_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "student_id", "student_assignment_id", "resource_id", name="uq_student_assignment_resource"
        ),
    )
    op.create_index("ix_student_progress_student_id", "student_progress", ["student_id"])
    op.create_index("ix_student_progress_student_assignment_id", "student_progress", ["student_assignment_id"])

    op.create_table(
        "weekly_schedules",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("student_id", sa.String(length=32), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_weekly_schedules_student_id", "weekly_schedules", ["student_id"])

    op.create_table(
        "weekly_schedule_weeks",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.String(length=32),
            sa.ForeignKey("weekly_schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("schedule_id", "week_number", name="uq_schedule_week_number"),
    )

    op.create_table(
        "weekly_schedule_topics",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "week_plan_id",
            sa.String(length=32),
            sa.ForeignKey("weekly_schedule_weeks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "assignment_id",
            sa.String(length=32),
            sa.ForeignKey("student_assignments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("topic_order", sa.Integer(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("week_plan_id", "assignment_id", name="uq_week_assignment"),
    )
    op.create_index("ix_weekly_schedule_topics_assignment_id", "weekly_schedule_topics", ["assignment_id"])


def downgrade() -> None:
    op.drop_table("weekly_schedule_topics")
    op.drop_table("weekly_schedule_weeks")
    op.drop_table("weekly_schedules")
    op.drop_table("student_progress")
    op.drop_table("student_assignments")
    op.drop_table("resource_topics")
    op.drop_table("resource_lessons")
    op.drop_table("resources")
    op.drop_table("lesson_topics")
    op.drop_table("lessons")
    op.drop_table("students")
    op.drop_table("users")

    lesson_color_enum.drop(op.get_bind(), checkfirst=True)
    exam_type_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
