"""create settings, calendar, links, students, preferences and activity log

Revision ID: 20261012_0004
Revises: 20261012_0003
Create Date: 2026-10-12 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261012_0004"
down_revision = "20261012_0003"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "institution_settings",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("institution_name", sa.String(length=200), nullable=False),
        sa.Column("logo_url", sa.String(length=1000), nullable=True),
        sa.Column("has_night_shift", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("lunch_color", sa.String(length=20), nullable=False, server_default="#f97316"),
        sa.Column("semantic_colors", sa.JSON(), nullable=False),
        sa.Column("available_weeks", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("session_timeouts", sa.JSON(), nullable=False),
        sa.Column("academic_config", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "calendar_events",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False, server_default="outros"),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_calendar_events_date", "calendar_events", ["date"])

    op.create_table(
        "portal_links",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "students",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("enrollment_id", sa.String(length=50), nullable=False),
        sa.Column(
            "class_id",
            sa.String(length=36),
            sa.ForeignKey("school_classes.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "pdt_id",
            sa.String(length=36),
            sa.ForeignKey("professionals.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Aguardando Laudo"),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("diagnosis", sa.String(length=500), nullable=True),
        sa.Column("pcd_profile", sa.JSON(), nullable=False),
        sa.Column("attachments", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(length=200), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        sa.Column("updated_by", sa.String(length=200), nullable=True),
        sa.Column("updated_by_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("enrollment_id", name="uq_students_enrollment_id"),
    )
    op.create_index("ix_students_name", "students", ["name"])

    op.create_table(
        "user_preferences",
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
            nullable=False,
        ),
        sa.Column("link_order", sa.JSON(), nullable=False),
        sa.Column("student_order", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("actor_name", sa.String(length=200), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=True),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_action", "activity_logs", ["action"])


def downgrade() -> None:
    op.drop_index("ix_activity_logs_action", table_name="activity_logs")
    op.drop_index("ix_activity_logs_user_id", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_table("user_preferences")
    op.drop_index("ix_students_name", table_name="students")
    op.drop_table("students")
    op.drop_table("portal_links")
    op.drop_index("ix_calendar_events_date", table_name="calendar_events")
    op.drop_table("calendar_events")
    op.drop_table("institution_settings")
