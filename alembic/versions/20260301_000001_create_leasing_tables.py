"""Create users, properties, applications and lease tables

Revision ID: 20260301_000001
Revises:
Create Date: 2026-03-01
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column(
            "role",
            sa.Enum("TENANT", "LANDLORD", "PROPERTY_MANAGER", "ADMIN", name="user_role", create_constraint=True),
            nullable=False,
        ),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("landlord_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["users.id"], name="fk_properties_landlord_id"),
    )
    op.create_index("ix_properties_landlord_id", "properties", ["landlord_id"])

    op.create_table(
        "lease_applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING", "UNDER_REVIEW", "APPROVED", "REJECTED", "WITHDRAWN",
                name="application_status",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name="fk_lease_applications_property_id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name="fk_lease_applications_tenant_id"),
    )
    op.create_index("ix_lease_applications_property_id", "lease_applications", ["property_id"])
    op.create_index("ix_lease_applications_tenant_id", "lease_applications", ["tenant_id"])
    op.create_index("ix_lease_applications_status", "lease_applications", ["status"])

    op.create_table(
        "lease_agreements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("landlord_id", sa.Integer(), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=False),
        sa.Column("tenancy_terms", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "DRAFT", "PENDING_TENANT", "TENANT_ACCEPTED", "PAYMENT_PENDING",
                "ACTIVE", "REJECTED", "EXPIRED", "TERMINATED",
                name="lease_status",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("UNPAID", "PROCESSING", "PAID", name="lease_payment_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("payment_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("termination_reason", sa.Text(), nullable=True),
        sa.Column("terminated_by", sa.Integer(), nullable=True),
        sa.Column("terminated_at", sa.DateTime(), nullable=True),
        sa.Column("sent_to_tenant_at", sa.DateTime(), nullable=True),
        sa.Column("tenant_responded_at", sa.DateTime(), nullable=True),
        sa.Column("acceptance_deadline", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name="fk_lease_agreements_property_id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name="fk_lease_agreements_tenant_id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["users.id"], name="fk_lease_agreements_landlord_id"),
        sa.ForeignKeyConstraint(["terminated_by"], ["users.id"], name="fk_lease_agreements_terminated_by"),
        sa.ForeignKeyConstraint(
            ["application_id"], ["lease_applications.id"], name="fk_lease_agreements_application_id"
        ),
        sa.UniqueConstraint("application_id", name="uq_lease_agreements_application_id"),
    )
    op.create_index("ix_lease_agreements_property_id", "lease_agreements", ["property_id"])
    op.create_index("ix_lease_agreements_tenant_id", "lease_agreements", ["tenant_id"])
    op.create_index("ix_lease_agreements_landlord_id", "lease_agreements", ["landlord_id"])
    op.create_index("ix_lease_agreements_status", "lease_agreements", ["status"])
    op.create_index("ix_lease_agreements_acceptance_deadline", "lease_agreements", ["acceptance_deadline"])

    op.create_table(
        "lease_documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("kind", sa.Enum("PDF", "IMAGE", name="document_kind", create_constraint=True), nullable=False),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["lease_agreements.id"], name="fk_lease_documents_lease_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_lease_documents_lease_id", "lease_documents", ["lease_id"])


def downgrade() -> None:
    op.drop_table("lease_documents")
    op.drop_table("lease_agreements")
    op.drop_table("lease_applications")
    op.drop_table("properties")
    op.drop_table("users")
