"""create resources and bookings

Revision ID: 20261012_0003
Revises: 20261012_0002
Create Date: 2026-10-12 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261012_0003"
down_revision = "20261012_0002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    resource_types = op.create_table(
        "resource_types",
        sa.Column("value", sa.String(length=100), primary_key=True, nullable=False),
        sa.Column("label", sa.String(length=150), nullable=False),
    )
    op.bulk_insert(
        resource_types,
        [
            {"value": "lab", "label": "Laboratório"},
            {"value": "projector", "label": "Projetor/Equipamento"},
            {"value": "room", "label": "Sala de Vídeo/Aula"},
            {"value": "auditorium", "label": "Auditório"},
            {"value": "tablet", "label": "Carrinho Móvel"},
        ],
    )

    op.create_table(
        "resources",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=100), nullable=False),
        sa.Column("details", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("icon_bg", sa.String(length=50), nullable=True),
        sa.Column("icon_color", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_resources_name", "resources", ["name"], unique=True)

    op.create_table(
        "resource_bookings",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "resource_id",
            sa.String(length=36),
            sa.ForeignKey("resources.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "time_slot_id",
            sa.String(length=36),
            sa.ForeignKey("time_slots.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "class_id",
            sa.String(length=36),
            sa.ForeignKey("school_classes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "professional_id",
            sa.String(length=36),
            sa.ForeignKey("professionals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("resource_id", "time_slot_id", "date", name="uq_resource_bookings_cell"),
    )
    op.create_index("ix_resource_bookings_resource_id", "resource_bookings", ["resource_id"])


def downgrade() -> None:
    op.drop_index("ix_resource_bookings_resource_id", table_name="resource_bookings")
    op.drop_table("resource_bookings")
    op.drop_index("ix_resources_name", table_name="resources")
    op.drop_table("resources")
    op.drop_table("resource_types")
