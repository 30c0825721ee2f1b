from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from pricelist.models.pricing_type import FinishType, ProductType

PricingModel = type[ProductType] | type[FinishType]


def list_rows(db: Session, model: PricingModel) -> list:
    stmt = select(model).order_by(model.name.asc())
    return list(db.scalars(stmt).all())


def get_row(db: Session, model: PricingModel, row_id: int):
    return db.get(model, row_id)


def find_by_name(db: Session, model: PricingModel, name: str, exclude_id: int | None = None):
    # SQLite lower() only folds ASCII, so Cyrillic names are compared here.
    wanted = name.casefold()
    for row in list_rows(db, model):
        if row.id != exclude_id and row.name.casefold() == wanted:
            return row
    return None


def create_row(
    db: Session,
    model: PricingModel,
    *,
    name: str,
    markup_percent: Decimal,
    work_cost: Decimal,
):
    row = model(name=name, markup_percent=markup_percent, work_cost=work_cost)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_row(db: Session, *, row, name: str, markup_percent: Decimal, work_cost: Decimal):
    row.name = name
    row.markup_percent = markup_percent
    row.work_cost = work_cost
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_row(db: Session, *, row) -> None:
    db.delete(row)
    db.commit()
