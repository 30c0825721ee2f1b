from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from pricelist.models.product import TechCardLineRow


def list_lines(db: Session, product_id: int) -> list[TechCardLineRow]:
    stmt = (
        select(TechCardLineRow)
        .where(TechCardLineRow.product_id == product_id)
        .order_by(TechCardLineRow.position.asc())
    )
    return list(db.scalars(stmt).all())


def list_lines_for_products(db: Session, product_ids: list[int]) -> dict[int, list[TechCardLineRow]]:
    if not product_ids:
        return {}
    stmt = (
        select(TechCardLineRow)
        .where(TechCardLineRow.product_id.in_(product_ids))
        .order_by(TechCardLineRow.product_id.asc(), TechCardLineRow.position.asc())
    )
    lines_by_product: dict[int, list[TechCardLineRow]] = {}
    for row in db.scalars(stmt).all():
        lines_by_product.setdefault(row.product_id, []).append(row)
    return lines_by_product


def replace_lines(db: Session, product_id: int, lines: Iterable) -> None:
    db.execute(delete(TechCardLineRow).where(TechCardLineRow.product_id == product_id))
    for position, line in enumerate(lines):
        db.add(
            TechCardLineRow(
                product_id=product_id,
                line_id=line.line_id,
                position=position,
                material_id=line.material_id,
                quantity=line.quantity,
            )
        )
    db.commit()
