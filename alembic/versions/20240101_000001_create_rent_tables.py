"""Create properties, units, tenants, leases and payments tables

Revision ID: 20240101_000001
Revises:
Create Date: 2024-01-01

Schedules and balances are derived at read time; only lease terms and
payment rows are stored.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20240101_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEASE_STATUSES = ("draft", "active", "expiring", "expired", "terminated")
PAYMENT_STATUSES = ("pending", "processing", "completed", "failed", "refunded")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("landlord_id", sa.Integer(), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_properties_landlord_id", "properties", ["landlord_id"])

    op.create_table(
        "property_units",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("unit_number", sa.String(50), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=True),
        sa.Column("deposit", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["property_id"], ["properties.id"],
            name="fk_property_units_property_id", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_property_units_property_id", "property_units", ["property_id"])

    op.create_table(
        "tenants",
        sa.Column("tenant_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("tenant_id"),
    )

    op.create_table(
        "leases",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("deposit", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("payment_day", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "status",
            sa.Enum(*LEASE_STATUSES, name="lease_status", create_constraint=True),
            nullable=False,
            server_default="draft",
        ),
        sa.Column("terms", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["unit_id"], ["property_units.id"], name="fk_leases_unit_id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.tenant_id"], name="fk_leases_tenant_id"),
        sa.CheckConstraint("payment_day BETWEEN 1 AND 31", name="ck_leases_payment_day"),
    )
    op.create_index("ix_leases_unit_id", "leases", ["unit_id"])
    op.create_index("ix_leases_tenant_id", "leases", ["tenant_id"])
    op.create_index("ix_leases_status", "leases", ["status"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUSES, name="payment_status", create_constraint=True),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("paid_date", sa.DateTime(), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["leases.id"],
            name="fk_payments_lease_id", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_payments_lease_id", "payments", ["lease_id"])
    op.create_index("ix_payments_status", "payments", ["status"])
    op.create_index("ix_payments_paid_date", "payments", ["paid_date"])


def downgrade() -> None:
    op.drop_index("ix_payments_paid_date", table_name="payments")
    op.drop_index("ix_payments_status", table_name="payments")
    op.drop_index("ix_payments_lease_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_leases_status", table_name="leases")
    op.drop_index("ix_leases_tenant_id", table_name="leases")
    op.drop_index("ix_leases_unit_id", table_name="leases")
    op.drop_table("leases")
    op.drop_table("tenants")
    op.drop_index("ix_property_units_property_id", table_name="property_units")
    op.drop_table("property_units")
    op.drop_index("ix_properties_landlord_id", table_name="properties")
    op.drop_table("properties")
