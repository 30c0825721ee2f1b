from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from pricelist.models.product import Collection


def list_collections(db: Session) -> list[Collection]:
    stmt = select(Collection).order_by(Collection.name.asc())
    return list(db.scalars(stmt).all())


def get_collection(db: Session, collection_id: int) -> Collection | None:
    return db.get(Collection, collection_id)


def find_by_name(db: Session, name: str, exclude_id: int | None = None) -> Collection | None:
    wanted = name.casefold()
    for collection in list_collections(db):
        if collection.id != exclude_id and collection.name.casefold() == wanted:
            return collection
    return None


def save_collection(db: Session, collection: Collection) -> Collection:
    db.add(collection)
    db.commit()
    db.refresh(collection)
    return collection


def delete_collection(db: Session, *, collection: Collection) -> None:
    db.delete(collection)
    db.commit()
