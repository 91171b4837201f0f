"""Add property managers and maintenance request tables

Revision ID: 20260301_000003
Revises: 20260301_000002
Create Date: 2026-03-01

properties.manager_id is the optional manager who handles a property
alongside its landlord.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_000003"
down_revision: Union[str, None] = "20260301_000002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MAINTENANCE_STATUSES = ("OPEN", "ACCEPTED", "SCHEDULED", "IN_PROGRESS", "COMPLETED", "REJECTED", "CANCELLED")
MAINTENANCE_ACTORS = ("TENANT", "LANDLORD", "PROPERTY_MANAGER", "SYSTEM")


def upgrade() -> None:
    with op.batch_alter_table("properties") as batch:
        batch.add_column(sa.Column("manager_id", sa.Integer(), nullable=True))
        batch.create_foreign_key(
            "fk_properties_manager_id", "users", ["manager_id"], ["id"], ondelete="SET NULL"
        )
        batch.create_index("ix_properties_manager_id", ["manager_id"])

    op.create_table(
        "maintenance_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("landlord_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "priority",
            sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", name="maintenance_priority", create_constraint=True),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(*MAINTENANCE_STATUSES, name="maintenance_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("scheduled_for", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("estimated_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("actual_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("assigned_contractor", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["lease_id"], ["lease_agreements.id"], name="fk_maintenance_requests_lease_id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name="fk_maintenance_requests_property_id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name="fk_maintenance_requests_tenant_id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["users.id"], name="fk_maintenance_requests_landlord_id"),
    )
    op.create_index("ix_maintenance_requests_lease_id", "maintenance_requests", ["lease_id"])
    op.create_index("ix_maintenance_requests_property_id", "maintenance_requests", ["property_id"])
    op.create_index("ix_maintenance_requests_tenant_id", "maintenance_requests", ["tenant_id"])
    op.create_index("ix_maintenance_requests_landlord_id", "maintenance_requests", ["landlord_id"])
    op.create_index("ix_maintenance_requests_status", "maintenance_requests", ["status"])

    op.create_table(
        "maintenance_comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("request_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column(
            "author_role",
            sa.Enum(*MAINTENANCE_ACTORS, name="maintenance_actor", create_constraint=True),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["request_id"], ["maintenance_requests.id"], name="fk_maintenance_comments_request_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], name="fk_maintenance_comments_author_id"),
    )
    op.create_index("ix_maintenance_comments_request_id", "maintenance_comments", ["request_id"])

    op.create_table(
        "maintenance_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("request_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*MAINTENANCE_STATUSES, name="maintenance_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "actor",
            sa.Enum(*MAINTENANCE_ACTORS, name="maintenance_actor", create_constraint=True),
            nullable=False,
        ),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["request_id"], ["maintenance_requests.id"], name="fk_maintenance_events_request_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["actor_id"], ["users.id"], name="fk_maintenance_events_actor_id"),
    )
    op.create_index("ix_maintenance_events_request_id", "maintenance_events", ["request_id"])


def downgrade() -> None:
    op.drop_table("maintenance_events")
    op.drop_table("maintenance_comments")
    op.drop_table("maintenance_requests")
    with op.batch_alter_table("properties") as batch:
        batch.drop_index("ix_properties_manager_id")
        batch.drop_constraint("fk_properties_manager_id", type_="foreignkey")
        batch.drop_column("manager_id")
