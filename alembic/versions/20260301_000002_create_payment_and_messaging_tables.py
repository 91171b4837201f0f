"""Create payment, ledger, rent schedule, notification and messaging tables

Revision ID: 20260301_000002
Revises: 20260301_000001
Create Date: 2026-03-01

payment_ledger is the immutable hash chain over settled payments.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20260301_000002"
down_revision: Union[str, None] = "20260301_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rent_installments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "PAID", "OVERDUE", "WAIVED", name="installment_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["lease_agreements.id"], name="fk_rent_installments_lease_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name="fk_rent_installments_tenant_id"),
    )
    op.create_index("ix_rent_installments_lease_id", "rent_installments", ["lease_id"])
    op.create_index("ix_rent_installments_tenant_id", "rent_installments", ["tenant_id"])
    op.create_index("ix_rent_installments_due_date", "rent_installments", ["due_date"])
    op.create_index("ix_rent_installments_status", "rent_installments", ["status"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("payer_id", sa.Integer(), nullable=False),
        sa.Column("installment_id", sa.Integer(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "RENT", "DEPOSIT", "DEPOSIT_AND_FIRST_RENT", "LATE_FEE", "MAINTENANCE_FEE", "OTHER",
                name="payment_type",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("PENDING", "COMPLETED", "FAILED", "REFUNDED", name="payment_record_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("method", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["lease_agreements.id"], name="fk_payments_lease_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["payer_id"], ["users.id"], name="fk_payments_payer_id"),
        sa.ForeignKeyConstraint(["installment_id"], ["rent_installments.id"], name="fk_payments_installment_id"),
    )
    op.create_index("ix_payments_lease_id", "payments", ["lease_id"])
    op.create_index("ix_payments_payer_id", "payments", ["payer_id"])

    op.create_table(
        "payment_ledger",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("payment_id", sa.Integer(), nullable=False),
        sa.Column("transaction_hash", sa.String(64), nullable=False),
        sa.Column("previous_hash", sa.String(64), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["payment_id"],
            ["payments.id"],
            name="fk_payment_ledger_payment_id",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint("payment_id", name="uq_payment_ledger_payment_id"),
        sa.UniqueConstraint("transaction_hash", name="uq_payment_ledger_transaction_hash"),
    )
    op.create_index("ix_payment_ledger_payment_id", "payment_ledger", ["payment_id"])
    op.create_index("ix_payment_ledger_transaction_hash", "payment_ledger", ["transaction_hash"])
    op.create_index("ix_payment_ledger_previous_hash", "payment_ledger", ["previous_hash"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "APPLICATION", "LEASE", "MAINTENANCE", "MESSAGE", "PAYMENT", "PROPERTY", "SYSTEM",
                name="notification_type",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("link", sa.String(500), nullable=True),
        sa.Column("related_entity_id", sa.Integer(), nullable=True),
        sa.Column(
            "related_entity_type",
            sa.Enum(
                "LEASE_APPLICATION", "LEASE_AGREEMENT", "MAINTENANCE_REQUEST", "CONVERSATION",
                "PAYMENT", "PROPERTY", "USER",
                name="related_entity_type",
                create_constraint=True,
            ),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_notifications_user_id", ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_read", "notifications", ["read"])

    op.create_table(
        "conversations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("landlord_id", sa.Integer(), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "ARCHIVED", name="conversation_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name="fk_conversations_property_id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], name="fk_conversations_tenant_id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["users.id"], name="fk_conversations_landlord_id"),
        sa.UniqueConstraint("tenant_id", "property_id", name="uq_conversations_tenant_property"),
    )
    op.create_index("ix_conversations_property_id", "conversations", ["property_id"])
    op.create_index("ix_conversations_tenant_id", "conversations", ["tenant_id"])
    op.create_index("ix_conversations_landlord_id", "conversations", ["landlord_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("conversation_id", sa.Integer(), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column(
            "sender_role",
            sa.Enum("TENANT", "LANDLORD", "PROPERTY_MANAGER", name="sender_role", create_constraint=True),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["conversation_id"], ["conversations.id"], name="fk_messages_conversation_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], name="fk_messages_sender_id"),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])


def downgrade() -> None:
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("notifications")
    op.drop_table("payment_ledger")
    op.drop_table("payments")
    op.drop_table("rent_installments")
