"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sponsor_organizations",
        sa.Column("sponsor_org_id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("point_value", sa.Numeric(10, 4), nullable=False, server_default="100"),
        sa.Column("point_upper_limit", sa.Integer(), nullable=True),
        sa.Column("point_lower_limit", sa.Integer(), nullable=True),
        sa.Column("monthly_point_limit", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_sponsor_organizations_sponsor_org_id", "sponsor_organizations", ["sponsor_org_id"])

    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=True, unique=True),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("user_type", sa.String(), nullable=False, server_default="driver"),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("driver_status", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lockout_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_user_id", "users", ["user_id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_sponsor_org_id", "users", ["sponsor_org_id"])

    op.create_table(
        "point_transactions",
        sa.Column("transaction_id", sa.Integer(), primary_key=True),
        sa.Column("driver_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("point_amount", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_by_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("point_amount <> 0", name="ck_point_transactions_nonzero"),
    )
    op.create_index("ix_point_transactions_transaction_id", "point_transactions", ["transaction_id"])
    op.create_index("ix_point_transactions_driver_user_id", "point_transactions", ["driver_user_id"])
    op.create_index("ix_point_transactions_sponsor_org_id", "point_transactions", ["sponsor_org_id"])
    op.create_index("ix_point_transactions_created_at", "point_transactions", ["created_at"])

    op.create_table(
        "point_contests",
        sa.Column("contest_id", sa.Integer(), primary_key=True),
        sa.Column("transaction_id", sa.Integer(), sa.ForeignKey("point_transactions.transaction_id"), nullable=False),
        sa.Column("driver_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("decision_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_by_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_point_contests_contest_id", "point_contests", ["contest_id"])
    op.create_index("ix_point_contests_transaction_id", "point_contests", ["transaction_id"])
    op.create_index("ix_point_contests_sponsor_org_id", "point_contests", ["sponsor_org_id"])

    op.create_table(
        "catalog_items",
        sa.Column("item_id", sa.Integer(), primary_key=True),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("ebay_item_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("item_web_url", sa.String(), nullable=True),
        sa.Column("last_price_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("points_price", sa.Integer(), nullable=False),
        sa.Column("availability_status", sa.String(), nullable=False, server_default="available"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("sponsor_org_id", "ebay_item_id", name="_org_ebay_item_uc"),
    )
    op.create_index("ix_catalog_items_item_id", "catalog_items", ["item_id"])
    op.create_index("ix_catalog_items_sponsor_org_id", "catalog_items", ["sponsor_org_id"])

    op.create_table(
        "carts",
        sa.Column("cart_id", sa.Integer(), primary_key=True),
        sa.Column("driver_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False, unique=True),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_carts_cart_id", "carts", ["cart_id"])

    op.create_table(
        "cart_items",
        sa.Column("cart_item_id", sa.Integer(), primary_key=True),
        sa.Column("cart_id", sa.Integer(), sa.ForeignKey("carts.cart_id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("catalog_items.item_id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("points_price_at_add", sa.Integer(), nullable=False),
        sa.UniqueConstraint("cart_id", "item_id", name="_cart_item_uc"),
    )
    op.create_index("ix_cart_items_cart_item_id", "cart_items", ["cart_item_id"])

    op.create_table(
        "orders",
        sa.Column("order_id", sa.Integer(), primary_key=True),
        sa.Column("driver_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("status", sa.String(), nullable=False, server_default="placed"),
        sa.Column("total_points", sa.Integer(), nullable=False),
        sa.Column("total_usd", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_orders_order_id", "orders", ["order_id"])
    op.create_index("ix_orders_driver_user_id", "orders", ["driver_user_id"])
    op.create_index("ix_orders_sponsor_org_id", "orders", ["sponsor_org_id"])

    op.create_table(
        "order_items",
        sa.Column("order_item_id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("catalog_items.item_id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("points_price_at_purchase", sa.Integer(), nullable=False),
        sa.Column("price_usd_at_purchase", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )
    op.create_index("ix_order_items_order_item_id", "order_items", ["order_item_id"])
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "driver_applications",
        sa.Column("application_id", sa.Integer(), primary_key=True),
        sa.Column("driver_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column(
            "sponsor_org_id", sa.Integer(),
            sa.ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("decision_reason", sa.Text(), nullable=True),
        sa.Column("reviewed_by_user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_driver_applications_application_id", "driver_applications", ["application_id"])
    op.create_index("ix_driver_applications_driver_user_id", "driver_applications", ["driver_user_id"])
    op.create_index("ix_driver_applications_sponsor_org_id", "driver_applications", ["sponsor_org_id"])


def downgrade() -> None:
    op.drop_table("driver_applications")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("cart_items")
    op.drop_table("carts")
    op.drop_table("catalog_items")
    op.drop_table("point_contests")
    op.drop_table("point_transactions")
    op.drop_table("users")
    op.drop_table("sponsor_organizations")
