"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE = sa.Enum(
    "ADMIN",
    "GESTIONNAIRE_APPROVISIONNEMENT",
    "RESPONSABLE_ACHATS",
    "SUPERVISEUR_LOGISTIQUE",
    "CHEF_PRODUCTION",
    "PLANIFICATEUR",
    "SUPERVISEUR_PRODUCTION",
    "GESTIONNAIRE_COMMERCIAL",
    "RESPONSABLE_LOGISTIQUE",
    "SUPERVISEUR_LIVRAISONS",
    name="role",
)
SUPPLY_ORDER_STATUS = sa.Enum("EN_ATTENTE", "EN_COURS", "RECUE", name="supply_order_status")
PRODUCTION_ORDER_STATUS = sa.Enum(
    "EN_ATTENTE", "EN_PRODUCTION", "TERMINE", "BLOQUE", name="production_order_status"
)
CUSTOMER_ORDER_STATUS = sa.Enum("EN_PREPARATION", "EN_ROUTE", "LIVREE", name="customer_order_status")
DELIVERY_STATUS = sa.Enum("PLANIFIEE", "EN_COURS", "LIVREE", name="delivery_status")


def upgrade() -> None:
    # ---------- PROCUREMENT ----------
    op.create_table(
        "suppliers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("contact", sa.String(200), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2)),
        sa.Column("lead_time", sa.Integer(), nullable=False),
        sa.CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="ck_supplier_rating_0_5"),
        sa.CheckConstraint("lead_time >= 1", name="ck_supplier_lead_time_pos"),
    )
    op.create_index("ix_suppliers_name", "suppliers", ["name"])

    op.create_table(
        "raw_materials",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("stock_min", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.CheckConstraint("stock >= 0", name="ck_raw_material_stock_nonneg"),
        sa.CheckConstraint("stock_min >= 0", name="ck_raw_material_stock_min_nonneg"),
    )
    op.create_index("ix_raw_materials_name", "raw_materials", ["name"])

    op.create_table(
        "material_suppliers",
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("raw_materials.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("supplier_id", sa.BigInteger(), sa.ForeignKey("suppliers.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "supply_orders",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("supplier_id", sa.BigInteger(), sa.ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("status", SUPPLY_ORDER_STATUS, nullable=False),
        sa.Column("expected_delivery_date", sa.Date()),
    )
    op.create_index("ix_supply_orders_supplier_id", "supply_orders", ["supplier_id"])

    op.create_table(
        "supply_order_materials",
        sa.Column("order_id", sa.BigInteger(), sa.ForeignKey("supply_orders.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("raw_materials.id", ondelete="CASCADE"), primary_key=True),
    )

    # ---------- PRODUCTION ----------
    op.create_table(
        "products",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("production_time", sa.Integer()),
        sa.Column("cost", sa.Numeric(14, 4), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("stock >= 0", name="ck_product_stock_nonneg"),
        sa.CheckConstraint("cost >= 0", name="ck_product_cost_nonneg"),
    )

    op.create_table(
        "bill_of_materials",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("product_id", sa.BigInteger(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_id", sa.BigInteger(), sa.ForeignKey("raw_materials.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_bom_qty_pos"),
    )
    op.create_index("ix_bill_of_materials_product_id", "bill_of_materials", ["product_id"])

    op.create_table(
        "production_orders",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("product_id", sa.BigInteger(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("status", PRODUCTION_ORDER_STATUS, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date()),
        sa.Column("is_priority", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint("quantity > 0", name="ck_production_order_qty_pos"),
    )
    op.create_index("ix_production_orders_product_id", "production_orders", ["product_id"])
    op.create_index("ix_production_orders_status", "production_orders", ["status"])

    # ---------- DELIVERY ----------
    op.create_table(
        "customers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("address", sa.String(255)),
        sa.Column("city", sa.String(100)),
    )
    op.create_index("ix_customers_name", "customers", ["name"])

    op.create_table(
        "customer_orders",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("customer_id", sa.BigInteger(), sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.BigInteger(), sa.ForeignKey("products.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("status", CUSTOMER_ORDER_STATUS, nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_customer_order_qty_pos"),
    )
    op.create_index("ix_customer_orders_customer_id", "customer_orders", ["customer_id"])
    op.create_index("ix_customer_orders_product_id", "customer_orders", ["product_id"])
    op.create_index("ix_customer_orders_status", "customer_orders", ["status"])

    op.create_table(
        "deliveries",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column(
            "order_id",
            sa.BigInteger(),
            sa.ForeignKey("customer_orders.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("vehicle", sa.String(100)),
        sa.Column("driver", sa.String(100)),
        sa.Column("status", DELIVERY_STATUS, nullable=False),
        sa.Column("delivery_date", sa.Date()),
        sa.Column("cost", sa.Numeric(14, 2)),
        sa.CheckConstraint("cost IS NULL OR cost >= 0", name="ck_delivery_cost_nonneg"),
    )

    # ---------- AUTH ----------
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_table("deliveries")
    op.drop_table("customer_orders")
    op.drop_table("customers")
    op.drop_table("production_orders")
    op.drop_table("bill_of_materials")
    op.drop_table("products")
    op.drop_table("supply_order_materials")
    op.drop_table("supply_orders")
    op.drop_table("material_suppliers")
    op.drop_table("raw_materials")
    op.drop_table("suppliers")

    bind = op.get_bind()
    for enum_type in (ROLE, DELIVERY_STATUS, CUSTOMER_ORDER_STATUS, PRODUCTION_ORDER_STATUS, SUPPLY_ORDER_STATUS):
        enum_type.drop(bind, checkfirst=True)
