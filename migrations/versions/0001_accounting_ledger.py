"""accounting ledger, payments, cogs and subledgers

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


ENUMS = {
    "transaction_type_enum": (
        "sale", "cogs", "purchase", "payment_received", "payment_made",
        "income", "expense",
    ),
    "reference_type_enum": ("sale", "purchase", "manual"),
    "account_type_enum": ("revenue", "expense", "asset", "liability"),
}


def _enum(name: str) -> postgresql.ENUM:
    # The types are created once in upgrade(); tables only reference them.
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _money() -> sa.Numeric:
    return sa.Numeric(12, 2)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "financial_ledger",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.Column(
            "transaction_type", _enum("transaction_type_enum"), nullable=False
        ),
        sa.Column("reference_type", _enum("reference_type_enum"), nullable=True),
        sa.Column("reference_id", sa.Integer(), nullable=True),
        sa.Column("amount", _money(), nullable=False),
        sa.Column("account_type", _enum("account_type_enum"), nullable=False),
        sa.Column("debit_amount", _money(), nullable=False, server_default="0"),
        sa.Column("credit_amount", _money(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "idx_fl_device_date", "financial_ledger", ["device_id", "transaction_date"]
    )
    op.create_index("idx_fl_type", "financial_ledger", ["transaction_type"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reference_type", _enum("reference_type_enum"), nullable=False),
        sa.Column("reference_id", sa.Integer(), nullable=True),
        sa.Column("payment_date", sa.DateTime(), nullable=False),
        sa.Column("amount", _money(), nullable=False),
        sa.Column(
            "payment_method", sa.String(50), nullable=False, server_default="Cash"
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "idx_payments_ref", "payments", ["reference_type", "reference_id"]
    )

    op.create_table(
        "cogs_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sale_id", sa.Integer(), nullable=True),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("cost_price", _money(), nullable=False),
        sa.Column("total_cost", _money(), nullable=False),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "accounts_receivable",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("sale_id", sa.Integer(), nullable=False),
        sa.Column("original_amount", _money(), nullable=False),
        sa.Column("paid_amount", _money(), nullable=False, server_default="0"),
        sa.Column("outstanding_amount", _money(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("sale_id", "device_id", name="uq_ar_sale_device"),
    )
    op.create_index("idx_ar_customer", "accounts_receivable", ["customer_id"])

    op.create_table(
        "accounts_payable",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("supplier_name", sa.String(255), nullable=False),
        sa.Column("purchase_id", sa.Integer(), nullable=False),
        sa.Column("original_amount", _money(), nullable=False),
        sa.Column("paid_amount", _money(), nullable=False, server_default="0"),
        sa.Column("outstanding_amount", _money(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("device_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "purchase_id", "device_id", name="uq_ap_purchase_device"
        ),
    )
    op.create_index("idx_ap_supplier", "accounts_payable", ["supplier_name"])


def downgrade() -> None:
    op.drop_index("idx_ap_supplier", table_name="accounts_payable")
    op.drop_table("accounts_payable")
    op.drop_index("idx_ar_customer", table_name="accounts_receivable")
    op.drop_table("accounts_receivable")
    op.drop_table("cogs_entries")
    op.drop_index("idx_payments_ref", table_name="payments")
    op.drop_table("payments")
    op.drop_index("idx_fl_type", table_name="financial_ledger")
    op.drop_index("idx_fl_device_date", table_name="financial_ledger")
    op.drop_table("financial_ledger")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
