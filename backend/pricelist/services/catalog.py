from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from pricelist.models.material import Material
from pricelist.models.pricing_type import FinishType, ProductType
from pricelist.models.product import Collection
from pricelist.repositories import product_collections as collections_repo
from pricelist.repositories import materials as materials_repo
from pricelist.repositories import pricing_types as pricing_types_repo
from pricelist.schemas.material import MaterialCreate, MaterialUpdate
from pricelist.schemas.pricing_type import PricingTypeBase
from pricelist.schemas.product import CollectionCreate, CollectionUpdate

logger = logging.getLogger("pricelist.services")


def _ensure_unique_article(db: Session, article: str | None, exclude_id: int | None = None) -> None:
    if not article:
        return
    if materials_repo.find_by_article(db, article, exclude_id=exclude_id):
        raise ValueError("Material article already exists.")


def list_materials(db: Session) -> list[Material]:
    return materials_repo.list_materials(db)


def get_material(db: Session, material_id: int) -> Material | None:
    return materials_repo.get_material(db, material_id)


def create_material(db: Session, data: MaterialCreate) -> Material:
    _ensure_unique_article(db, data.article)
    material = materials_repo.create_material(
        db,
        name=data.name,
        article=data.article,
        unit=data.unit,
        unit_price=data.unit_price,
    )
    logger.info("Material created: id=%s article=%s", material.id, material.article)
    return material


def update_material(db: Session, material_id: int, data: MaterialUpdate) -> Material:
    material = materials_repo.get_material(db, material_id)
    if material is None:
        raise ValueError("Material not found.")
    _ensure_unique_article(db, data.article, exclude_id=material_id)
    return materials_repo.update_material(
        db,
        material=material,
        name=data.name,
        article=data.article,
        unit=data.unit,
        unit_price=data.unit_price,
    )


def delete_material(db: Session, material_id: int) -> None:
    material = materials_repo.get_material(db, material_id)
    if material is None:
        raise ValueError("Material not found.")
    # Tech card lines keep the id and show up as unresolved from now on.
    materials_repo.delete_material(db, material=material)
    logger.info("Material deleted: id=%s", material_id)


def materials_by_id(db: Session, material_ids: list[int] | None = None) -> dict[int, Material]:
    if material_ids is None:
        materials = materials_repo.list_materials(db)
    else:
        materials = materials_repo.get_materials_by_ids(db, sorted(set(material_ids)))
    return {material.id: material for material in materials}


def materials_by_article(db: Session) -> dict[str, Material]:
    lookup: dict[str, Material] = {}
    for material in materials_repo.list_materials_with_article(db):
        article = (material.article or "").strip()
        if article and article not in lookup:
            lookup[article] = material
    return lookup


def _list_pricing_rows(db: Session, model) -> list:
    return pricing_types_repo.list_rows(db, model)


def _create_pricing_row(db: Session, model, data: PricingTypeBase, label: str):
    if pricing_types_repo.find_by_name(db, model, data.name):
        raise ValueError(f"{label} name already exists.")
    return pricing_types_repo.create_row(
        db,
        model,
        name=data.name,
        markup_percent=data.markup_percent,
        work_cost=data.work_cost,
    )


def _update_pricing_row(db: Session, model, row_id: int, data: PricingTypeBase, label: str):
    row = pricing_types_repo.get_row(db, model, row_id)
    if row is None:
        raise ValueError(f"{label} not found.")
    if pricing_types_repo.find_by_name(db, model, data.name, exclude_id=row_id):
        raise ValueError(f"{label} name already exists.")
    return pricing_types_repo.update_row(
        db,
        row=row,
        name=data.name,
        markup_percent=data.markup_percent,
        work_cost=data.work_cost,
    )


def _delete_pricing_row(db: Session, model, row_id: int, label: str) -> None:
    row = pricing_types_repo.get_row(db, model, row_id)
    if row is None:
        raise ValueError(f"{label} not found.")
    pricing_types_repo.delete_row(db, row=row)
    db.expire_all()


def list_product_types(db: Session) -> list[ProductType]:
    return _list_pricing_rows(db, ProductType)


def get_product_type(db: Session, product_type_id: int) -> ProductType | None:
    return pricing_types_repo.get_row(db, ProductType, product_type_id)


def create_product_type(db: Session, data: PricingTypeBase) -> ProductType:
    return _create_pricing_row(db, ProductType, data, "Product type")


def update_product_type(db: Session, product_type_id: int, data: PricingTypeBase) -> ProductType:
    return _update_pricing_row(db, ProductType, product_type_id, data, "Product type")


def delete_product_type(db: Session, product_type_id: int) -> None:
    _delete_pricing_row(db, ProductType, product_type_id, "Product type")


def list_finish_types(db: Session) -> list[FinishType]:
    return _list_pricing_rows(db, FinishType)


def get_finish_type(db: Session, finish_type_id: int) -> FinishType | None:
    return pricing_types_repo.get_row(db, FinishType, finish_type_id)


def create_finish_type(db: Session, data: PricingTypeBase) -> FinishType:
    return _create_pricing_row(db, FinishType, data, "Finish type")


def update_finish_type(db: Session, finish_type_id: int, data: PricingTypeBase) -> FinishType:
    return _update_pricing_row(db, FinishType, finish_type_id, data, "Finish type")


def delete_finish_type(db: Session, finish_type_id: int) -> None:
    _delete_pricing_row(db, FinishType, finish_type_id, "Finish type")


def list_collections(db: Session) -> list[Collection]:
    return collections_repo.list_collections(db)


def get_collection(db: Session, collection_id: int) -> Collection | None:
    return collections_repo.get_collection(db, collection_id)


def create_collection(db: Session, data: CollectionCreate) -> Collection:
    if collections_repo.find_by_name(db, data.name):
        raise ValueError("Collection name already exists.")
    return collections_repo.save_collection(db, Collection(**data.model_dump()))


def update_collection(db: Session, collection_id: int, data: CollectionUpdate) -> Collection:
    collection = collections_repo.get_collection(db, collection_id)
    if collection is None:
        raise ValueError("Collection not found.")
    if collections_repo.find_by_name(db, data.name, exclude_id=collection_id):
        raise ValueError("Collection name already exists.")
    for key, value in data.model_dump().items():
        setattr(collection, key, value)
    return collections_repo.save_collection(db, collection)


def delete_collection(db: Session, collection_id: int) -> None:
    collection = collections_repo.get_collection(db, collection_id)
    if collection is None:
        raise ValueError("Collection not found.")
    collections_repo.delete_collection(db, collection=collection)
    db.expire_all()
