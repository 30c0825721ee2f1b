"""create catalog tables

Revision ID: 0001_create_catalog_tables
Revises:
Create Date: 2026-10-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


revision = "0001_create_catalog_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    existing_tables = set(inspect(bind).get_table_names())

    if "materials" not in existing_tables:
        op.create_table(
            "materials",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("article", sa.String(length=100), nullable=True),
            sa.Column("unit", sa.String(length=50), nullable=False, server_default="шт"),
            sa.Column("unit_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
            sa.CheckConstraint("unit_price >= 0", name="ck_materials_unit_price_non_negative"),
        )
        op.create_index("ix_materials_article", "materials", ["article"])
    if "product_types" not in existing_tables:
        op.create_table(
            "product_types",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("markup_percent", sa.Numeric(6, 2), nullable=False, server_default="0"),
            sa.Column("work_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
            sa.UniqueConstraint("name", name="uq_product_types_name"),
        )
    if "finish_types" not in existing_tables:
        op.create_table(
            "finish_types",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("markup_percent", sa.Numeric(6, 2), nullable=False, server_default="0"),
            sa.Column("work_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
            sa.UniqueConstraint("name", name="uq_finish_types_name"),
        )
    if "collections" not in existing_tables:
        op.create_table(
            "collections",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("description", sa.String(length=1000), nullable=True),
            sa.Column("group_name", sa.String(length=255), nullable=True),
            sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.UniqueConstraint("name", name="uq_collections_name"),
        )
    if "products" not in existing_tables:
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("article", sa.String(length=100), nullable=True),
            sa.Column("image_url", sa.String(length=1000), nullable=True),
            sa.Column("collection_id", sa.Integer(), nullable=True),
            sa.Column("product_type_id", sa.Integer(), nullable=True),
            sa.Column("finish_type_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["product_type_id"], ["product_types.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["finish_type_id"], ["finish_types.id"], ondelete="SET NULL"),
        )
        op.create_index("ix_products_article", "products", ["article"])


def downgrade() -> None:
    op.drop_index("ix_products_article", table_name="products")
    op.drop_table("products")
    op.drop_table("collections")
    op.drop_table("finish_types")
    op.drop_table("product_types")
    op.drop_index("ix_materials_article", table_name="materials")
    op.drop_table("materials")
