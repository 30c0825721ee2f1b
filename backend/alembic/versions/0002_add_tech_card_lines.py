"""add tech card lines

Revision ID: 0002_add_tech_card_lines
Revises: 0001_create_catalog_tables
Create Date: 2026-10-08 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0002_add_tech_card_lines"
down_revision = "0001_create_catalog_tables"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tech_card_lines",
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("line_id", sa.String(length=32), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        # No FK on material_id: lines keep ids of deleted materials.
        sa.Column("material_id", sa.Integer(), nullable=True),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("product_id", "line_id"),
        sa.CheckConstraint("quantity >= 0", name="ck_tech_card_lines_quantity_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("tech_card_lines")
