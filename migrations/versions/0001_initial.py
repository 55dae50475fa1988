"""users, transactions and prices

Revision ID: 0001
Revises:
Create Date: 2024-01-01 00:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("bookid", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("total_grams", sa.Numeric(19, 4), nullable=False),
        sa.Column("total_amount_spent", sa.Numeric(19, 4), nullable=False),
        sa.Column("months_paid", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("total_grams >= 0", name="ck_users_total_grams"),
        sa.CheckConstraint(
            "total_amount_spent >= 0", name="ck_users_total_amount_spent"
        ),
        sa.CheckConstraint(
            "months_paid >= 0 AND months_paid <= 11",
            name="ck_users_months_paid",
        ),
    )
    op.create_index("ix_users_bookid", "users", ["bookid"], unique=True)

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("bookid", sa.String(64), nullable=False),
        sa.Column("user_name", sa.String(100), nullable=False),
        sa.Column("grams_purchased", sa.Numeric(19, 4), nullable=False),
        sa.Column("price_per_gram", sa.Numeric(19, 4), nullable=False),
        sa.Column("total_amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "grams_purchased > 0", name="ck_transactions_grams_purchased"
        ),
        sa.CheckConstraint(
            "price_per_gram > 0", name="ck_transactions_price_per_gram"
        ),
    )
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])

    op.create_table(
        "prices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("gold_price", sa.Numeric(19, 4), nullable=False),
        sa.Column("silver_price", sa.Numeric(19, 4), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_prices_updated_at", "prices", ["updated_at"])


def downgrade() -> None:
    op.drop_index("ix_prices_updated_at", table_name="prices")
    op.drop_table("prices")
    op.drop_index("ix_transactions_user_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_users_bookid", table_name="users")
    op.drop_table("users")
