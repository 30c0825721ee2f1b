"""collection layout, timestamps and exact tech card quantities

Revision ID: 0003_collection_layout
Revises: 0002_add_tech_card_lines
Create Date: 2026-10-17 00:00:00.000000
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


revision = "0003_collection_layout"
down_revision = "0002_add_tech_card_lines"
branch_labels = None
depends_on = None

TIMESTAMPED_TABLES = ("materials", "product_types", "finish_types", "collections", "products")


def _columns(table_name: str) -> set[str]:
    return {column["name"] for column in inspect(op.get_bind()).get_columns(table_name)}


def _add_timestamps() -> None:
    now = datetime.utcnow()
    for table_name in TIMESTAMPED_TABLES:
        columns = _columns(table_name)
        if "created_at" not in columns:
            op.add_column(table_name, sa.Column("created_at", sa.DateTime(), nullable=True))
        if "updated_at" not in columns:
            op.add_column(table_name, sa.Column("updated_at", sa.DateTime(), nullable=True))
        op.execute(
            sa.text(
                f"UPDATE {table_name} "
                "SET created_at = COALESCE(created_at, :now), updated_at = COALESCE(updated_at, created_at, :now)"
            ).bindparams(now=now)
        )


def _add_collection_layout() -> None:
    columns = _columns("collections")
    if "pinned" not in columns:
        op.add_column(
            "collections",
            sa.Column("pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        )
    if "cover_url" not in columns:
        op.add_column("collections", sa.Column("cover_url", sa.String(length=1000), nullable=True))
    if "product_order" not in columns:
        op.add_column(
            "collections",
            sa.Column("product_order", sa.JSON(), nullable=False, server_default="[]"),
        )


def _rebuild_tech_card_lines(quantity_type, to_stored) -> None:
    bind = op.get_bind()
    rows = bind.execute(
        sa.text("SELECT product_id, line_id, position, material_id, quantity FROM tech_card_lines")
    ).fetchall()

    op.create_table(
        "tech_card_lines_new",
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("line_id", sa.String(length=32), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("material_id", sa.Integer(), nullable=True),
        sa.Column("quantity", quantity_type, nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("product_id", "line_id"),
    )
    for product_id, line_id, position, material_id, quantity in rows:
        bind.execute(
            sa.text(
                "INSERT INTO tech_card_lines_new (product_id, line_id, position, material_id, quantity) "
                "VALUES (:product_id, :line_id, :position, :material_id, :quantity)"
            ),
            {
                "product_id": product_id,
                "line_id": line_id,
                "position": position,
                "material_id": material_id,
                "quantity": to_stored(quantity),
            },
        )
    op.drop_table("tech_card_lines")
    op.rename_table("tech_card_lines_new", "tech_card_lines")


def _quantity_text(value) -> str:
    if value is None:
        return "0"
    return format(Decimal(str(value)).normalize(), "f")


def upgrade() -> None:
    _add_timestamps()
    _add_collection_layout()
    # Quantities move from Numeric(14, 4) to exact decimal text.
    _rebuild_tech_card_lines(sa.Text(), _quantity_text)


def downgrade() -> None:
    _rebuild_tech_card_lines(sa.Numeric(14, 4), lambda value: Decimal(value or "0"))

    with op.batch_alter_table("collections") as batch:
        batch.drop_column("product_order")
        batch.drop_column("cover_url")
        batch.drop_column("pinned")
    for table_name in TIMESTAMPED_TABLES:
        with op.batch_alter_table(table_name) as batch:
            batch.drop_column("updated_at")
            batch.drop_column("created_at")
