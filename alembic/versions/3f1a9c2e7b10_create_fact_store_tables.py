"""create_fact_store_tables

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ingested_at() -> sa.Column:
    return sa.Column(
        "ingested_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """Apply migration - create order, dimension and order_items tables."""
    op.create_table(
        "orders",
        sa.Column("order_id", sa.String(length=64), nullable=False),
        sa.Column("invoiced_date", sa.DateTime(timezone=False), nullable=True),
        # Minor units
        sa.Column("total_value", sa.BigInteger(), nullable=True),
        sa.Column("currency_code", sa.String(length=3), nullable=True),
        sa.Column("status", sa.String(length=40), nullable=True),
        _ingested_at(),
        sa.PrimaryKeyConstraint("order_id"),
    )
    op.create_index(op.f("ix_orders_invoiced_date"), "orders", ["invoiced_date"], unique=False)

    op.create_table(
        "products",
        sa.Column("product_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("brand_name", sa.String(length=120), nullable=True),
        sa.Column("category_id", sa.String(length=64), nullable=True),
        sa.Column("category_name", sa.String(length=120), nullable=True),
        _ingested_at(),
        sa.PrimaryKeyConstraint("product_id"),
    )
    op.create_index(
        op.f("ix_products_category_name"), "products", ["category_name"], unique=False
    )

    op.create_table(
        "warehouses",
        sa.Column("warehouse_id", sa.String(length=64), nullable=False),
        sa.Column("warehouse_name", sa.String(length=255), nullable=True),
        sa.Column("address_street", sa.String(length=255), nullable=True),
        sa.Column("address_city", sa.String(length=120), nullable=True),
        sa.Column("address_state", sa.String(length=120), nullable=True),
        sa.Column("address_country", sa.String(length=3), nullable=True),
        _ingested_at(),
        sa.PrimaryKeyConstraint("warehouse_id"),
    )

    op.create_table(
        "destinations",
        sa.Column("destination_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("state", sa.String(length=120), nullable=True),
        sa.Column("country", sa.String(length=3), nullable=True),
        _ingested_at(),
        sa.PrimaryKeyConstraint("destination_id"),
        sa.UniqueConstraint("city", "state", "country", name="uq_destinations_natural_key"),
    )

    op.create_table(
        "order_items",
        sa.Column("order_id", sa.String(length=64), nullable=False),
        sa.Column("product_id", sa.String(length=64), nullable=False),
        sa.Column("warehouse_id", sa.String(length=64), nullable=True),
        sa.Column("destination_id", sa.Integer(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("unit_price", sa.BigInteger(), nullable=True),
        _ingested_at(),
        # Grain: one row per (order_id, product_id)
        sa.PrimaryKeyConstraint("order_id", "product_id"),
        sa.ForeignKeyConstraint(["order_id"], ["orders.order_id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.product_id"]),
        sa.ForeignKeyConstraint(["warehouse_id"], ["warehouses.warehouse_id"]),
        sa.ForeignKeyConstraint(["destination_id"], ["destinations.destination_id"]),
        sa.CheckConstraint("quantity IS NULL OR quantity >= 0", name="ck_order_items_quantity"),
        sa.CheckConstraint("unit_price IS NULL OR unit_price >= 0", name="ck_order_items_price"),
    )
    op.create_index(
        op.f("ix_order_items_product_id"), "order_items", ["product_id"], unique=False
    )
    op.create_index(
        op.f("ix_order_items_warehouse_id"), "order_items", ["warehouse_id"], unique=False
    )
    op.create_index(
        op.f("ix_order_items_destination_id"), "order_items", ["destination_id"], unique=False
    )
    op.create_index(
        "ix_order_items_warehouse_product",
        "order_items",
        ["warehouse_id", "product_id"],
        unique=False,
    )


def downgrade() -> None:
    """Revert migration - drop the fact store."""
    op.drop_index("ix_order_items_warehouse_product", table_name="order_items")
    op.drop_index(op.f("ix_order_items_destination_id"), table_name="order_items")
    op.drop_index(op.f("ix_order_items_warehouse_id"), table_name="order_items")
    op.drop_index(op.f("ix_order_items_product_id"), table_name="order_items")
    op.drop_table("order_items")
    op.drop_table("destinations")
    op.drop_table("warehouses")
    op.drop_index(op.f("ix_products_category_name"), table_name="products")
    op.drop_table("products")
    op.drop_index(op.f("ix_orders_invoiced_date"), table_name="orders")
    op.drop_table("orders")
