from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from pricelist.models.product import Product


def list_products(db: Session) -> list[Product]:
    stmt = (
        select(Product)
        .options(
            selectinload(Product.collection),
            selectinload(Product.product_type),
            selectinload(Product.finish_type),
        )
        .order_by(Product.name.asc(), Product.id.asc())
    )
    return list(db.scalars(stmt).all())


def get_product(db: Session, product_id: int) -> Product | None:
    return db.get(Product, product_id)


def save_product(db: Session, product: Product) -> Product:
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, *, product: Product) -> None:
    db.delete(product)
    db.commit()
