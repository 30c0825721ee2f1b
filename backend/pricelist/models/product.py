from __future__ import annotations

from decimal import Decimal

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pricelist.db.base import Base, TimestampMixin
from pricelist.db.types import DecimalText


class Collection(TimestampMixin, Base):
    __tablename__ = "collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    group_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cover_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    # Product ids in display order; products missing from it follow by name.
    product_order: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)

    products = relationship("Product", back_populates="collection", passive_deletes=True)


class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    article: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    collection_id: Mapped[int | None] = mapped_column(
        ForeignKey("collections.id", ondelete="SET NULL"), nullable=True
    )
    product_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("product_types.id", ondelete="SET NULL"), nullable=True
    )
    finish_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("finish_types.id", ondelete="SET NULL"), nullable=True
    )

    collection = relationship("Collection", back_populates="products")
    product_type = relationship("ProductType")
    finish_type = relationship("FinishType")
    tech_card_lines = relationship(
        "TechCardLineRow",
        back_populates="product",
        cascade="all, delete",
        passive_deletes=True,
        order_by="TechCardLineRow.position",
    )


class TechCardLineRow(Base):
    __tablename__ = "tech_card_lines"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    line_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    # No foreign key: lines keep pointing at deleted materials.
    material_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    quantity: Mapped[Decimal] = mapped_column(DecimalText, nullable=False, default=Decimal("0"))

    product = relationship("Product", back_populates="tech_card_lines")
