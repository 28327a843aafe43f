"""baseline

Creates the holdings, stock_prices, transactions and portfolio_history
tables.

Revision ID: 001_baseline
Revises:
Create Date: 2026-03-01 09:00:00+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "001_baseline"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "holdings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ticker", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("purchase_price", sa.Float(), nullable=False),
        sa.Column("target_allocation_percent", sa.Float(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("acquired_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity > 0", name=op.f("ck_holdings_quantity_positive")),
        sa.CheckConstraint("purchase_price > 0", name=op.f("ck_holdings_purchase_price_positive")),
        sa.CheckConstraint(
            "target_allocation_percent >= 0 AND target_allocation_percent <= 100",
            name=op.f("ck_holdings_target_range"),
        ),
        sa.CheckConstraint(
            "category IN ('Core', 'Satellite', 'Speculative')",
            name=op.f("ck_holdings_category"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_holdings")),
    )
    op.create_index("idx_holdings_ticker", "holdings", ["ticker"])
    op.create_index("idx_holdings_category", "holdings", ["category"])

    op.create_table(
        "stock_prices",
        sa.Column("ticker", sa.String(20), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("open", sa.Float(), nullable=True),
        sa.Column("high", sa.Float(), nullable=True),
        sa.Column("low", sa.Float(), nullable=True),
        sa.Column("volume", sa.BigInteger(), nullable=True),
        sa.Column("bar_date", sa.Date(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("ticker", name=op.f("pk_stock_prices")),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("ticker", sa.String(20), nullable=False),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("type IN ('ADD', 'UPDATE', 'DELETE')", name=op.f("ck_transactions_type")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_transactions")),
    )
    op.create_index(
        "idx_transactions_created",
        "transactions",
        ["created_at"],
        postgresql_ops={"created_at": "DESC"},
    )

    op.create_table(
        "portfolio_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_value", sa.Float(), nullable=False),
        sa.Column("total_invested", sa.Float(), nullable=False),
        sa.Column("gain_loss", sa.Float(), nullable=False),
        sa.Column("gain_loss_percent", sa.Float(), nullable=False),
        sa.Column("holdings_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_portfolio_history")),
    )
    op.create_index(
        "idx_portfolio_history_recorded",
        "portfolio_history",
        ["recorded_at"],
        postgresql_ops={"recorded_at": "DESC"},
    )


def downgrade() -> None:
    op.drop_index("idx_portfolio_history_recorded", table_name="portfolio_history")
    op.drop_table("portfolio_history")
    op.drop_index("idx_transactions_created", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("stock_prices")
    op.drop_index("idx_holdings_category", table_name="holdings")
    op.drop_index("idx_holdings_ticker", table_name="holdings")
    op.drop_table("holdings")
