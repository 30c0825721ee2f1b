from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from pricelist.models.material import Material


def list_materials(db: Session) -> list[Material]:
    stmt = select(Material).order_by(Material.name.asc(), Material.id.asc())
    return list(db.scalars(stmt).all())


def get_material(db: Session, material_id: int) -> Material | None:
    return db.get(Material, material_id)


def get_materials_by_ids(db: Session, material_ids: list[int]) -> list[Material]:
    if not material_ids:
        return []
    stmt = select(Material).where(Material.id.in_(material_ids))
    return list(db.scalars(stmt).all())


def list_materials_with_article(db: Session) -> list[Material]:
    stmt = select(Material).where(Material.article.is_not(None)).order_by(Material.id.asc())
    return list(db.scalars(stmt).all())


def find_by_article(db: Session, article: str, exclude_id: int | None = None) -> Material | None:
    # SQLite lower() only folds ASCII; Cyrillic articles are compared here.
    wanted = article.strip().casefold()
    for material in list_materials_with_article(db):
        if material.id != exclude_id and (material.article or "").strip().casefold() == wanted:
            return material
    return None


def create_material(
    db: Session,
    *,
    name: str,
    article: str | None,
    unit: str,
    unit_price: Decimal,
) -> Material:
    material = Material(name=name, article=article, unit=unit, unit_price=unit_price)
    db.add(material)
    db.commit()
    db.refresh(material)
    return material


def update_material(
    db: Session,
    *,
    material: Material,
    name: str,
    article: str | None,
    unit: str,
    unit_price: Decimal,
) -> Material:
    material.name = name
    material.article = article
    material.unit = unit
    material.unit_price = unit_price
    db.add(material)
    db.commit()
    db.refresh(material)
    return material


def delete_material(db: Session, *, material: Material) -> None:
    db.delete(material)
    db.commit()
