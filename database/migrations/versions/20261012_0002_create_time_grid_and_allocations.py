"""create time grid and allocations

Revision ID: 20261012_0002
Revises: 20261012_0001
Create Date: 2026-10-12 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261012_0002"
down_revision = "20261012_0001"
branch_labels = None
depends_on = None


slot_kind_enum = sa.Enum("class", "break", "lunch", name="slot_kind")


def upgrade() -> None:
    op.create_table(
        "time_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("label", sa.String(length=50), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("kind", slot_kind_enum, nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_time_slots_position", "time_slots", ["position"])

    op.create_table(
        "class_allocations",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "teacher_id",
            sa.String(length=36),
            sa.ForeignKey("professionals.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "class_id",
            sa.String(length=36),
            sa.ForeignKey("school_classes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "time_slot_id",
            sa.String(length=36),
            sa.ForeignKey("time_slots.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.String(length=10), nullable=False),
        sa.Column("year", sa.String(length=4), nullable=False),
        sa.Column("semester", sa.String(length=1), nullable=False),
        sa.Column("room", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "class_id",
            "time_slot_id",
            "day_of_week",
            "year",
            "semester",
            name="uq_class_allocations_cell",
        ),
    )
    op.create_index("ix_class_allocations_teacher_id", "class_allocations", ["teacher_id"])
    op.create_index("ix_class_allocations_year", "class_allocations", ["year"])

    op.create_table(
        "complementary_allocations",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "teacher_id",
            sa.String(length=36),
            sa.ForeignKey("professionals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "time_slot_id",
            sa.String(length=36),
            sa.ForeignKey("time_slots.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.String(length=10), nullable=False),
        sa.Column("year", sa.String(length=4), nullable=False),
        sa.Column("semester", sa.String(length=1), nullable=False),
        sa.Column("activity", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_complementary_allocations_year", "complementary_allocations", ["year"])
    op.create_index(
        "ix_complementary_allocations_teacher_cell",
        "complementary_allocations",
        ["teacher_id", "day_of_week", "time_slot_id", "year"],
    )


def downgrade() -> None:
    op.drop_index("ix_complementary_allocations_teacher_cell", table_name="complementary_allocations")
    op.drop_index("ix_complementary_allocations_year", table_name="complementary_allocations")
    op.drop_table("complementary_allocations")
    op.drop_index("ix_class_allocations_year", table_name="class_allocations")
    op.drop_index("ix_class_allocations_teacher_id", table_name="class_allocations")
    op.drop_table("class_allocations")
    op.drop_index("ix_time_slots_position", table_name="time_slots")
    op.drop_table("time_slots")
    slot_kind_enum.drop(op.get_bind(), checkfirst=True)
