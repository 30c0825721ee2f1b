from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from pricelist.core.config import settings
from pricelist.models.pricing_type import FinishType, ProductType
from pricelist.models.product import Product
from pricelist.repositories import product_collections as collections_repo
from pricelist.repositories import pricing_types as pricing_types_repo
from pricelist.repositories import products as products_repo
from pricelist.repositories import tech_cards as tech_cards_repo
from pricelist.schemas.product import ProductCreate, ProductUpdate
from pricelist.services import catalog as catalog_service
from pricelist.services.costing import ProductCostSummary, compute_cost_summary
from pricelist.services.quantity_edit import parse_quantity_text
from pricelist.services.tech_card import TechCardLine, TechCardLineStore
from pricelist.services.tech_card_import import ImportReport, import_rows, read_tabular_file

logger = logging.getLogger("pricelist.services")


def _validate_references(db: Session, data: ProductCreate) -> None:
    if data.collection_id is not None and collections_repo.get_collection(db, data.collection_id) is None:
        raise ValueError("Collection not found.")
    if data.product_type_id is not None and pricing_types_repo.get_row(db, ProductType, data.product_type_id) is None:
        raise ValueError("Product type not found.")
    if data.finish_type_id is not None and pricing_types_repo.get_row(db, FinishType, data.finish_type_id) is None:
        raise ValueError("Finish type not found.")


def _require_product(db: Session, product_id: int) -> Product:
    product = products_repo.get_product(db, product_id)
    if product is None:
        raise ValueError("Product not found.")
    return product


def list_products(db: Session) -> list[Product]:
    return products_repo.list_products(db)


def get_product(db: Session, product_id: int) -> Product | None:
    return products_repo.get_product(db, product_id)


def create_product(db: Session, data: ProductCreate) -> Product:
    _validate_references(db, data)
    product = products_repo.save_product(db, Product(**data.model_dump()))
    logger.info("Product created: id=%s name=%s", product.id, product.name)
    return product


def update_product(db: Session, product_id: int, data: ProductUpdate) -> Product:
    product = _require_product(db, product_id)
    _validate_references(db, data)
    for key, value in data.model_dump().items():
        setattr(product, key, value)
    return products_repo.save_product(db, product)


def delete_product(db: Session, product_id: int) -> None:
    product = _require_product(db, product_id)
    products_repo.delete_product(db, product=product)
    logger.info("Product deleted with its tech card: id=%s", product_id)


def load_tech_card(db: Session, product_id: int) -> TechCardLineStore:
    _require_product(db, product_id)
    return TechCardLineStore(
        TechCardLine(line_id=row.line_id, material_id=row.material_id, quantity=row.quantity)
        for row in tech_cards_repo.list_lines(db, product_id)
    )


def save_tech_card(db: Session, product_id: int, store: TechCardLineStore) -> None:
    product = _require_product(db, product_id)
    lines = store.snapshot()
    product.updated_at = datetime.utcnow()
    tech_cards_repo.replace_lines(db, product_id, lines)
    logger.info("Tech card saved: product_id=%s lines=%s", product_id, len(lines))


def summarize(db: Session, product: Product, lines) -> ProductCostSummary:
    lines = tuple(lines)
    materials = catalog_service.materials_by_id(
        db, [line.material_id for line in lines if line.material_id is not None]
    )
    return compute_cost_summary(lines, materials, product.product_type, product.finish_type)


def compute_product_cost(db: Session, product_id: int) -> ProductCostSummary:
    product = _require_product(db, product_id)
    return summarize(db, product, load_tech_card(db, product_id).snapshot())


def add_tech_card_line(db: Session, product_id: int, material_id: int, quantity=Decimal("0")) -> str:
    if catalog_service.get_material(db, material_id) is None:
        raise ValueError("Selected material does not exist.")
    store = load_tech_card(db, product_id)
    line_id = store.add_line(material_id, quantity)
    save_tech_card(db, product_id, store)
    return line_id


def remove_tech_card_line(db: Session, product_id: int, line_id: str) -> bool:
    store = load_tech_card(db, product_id)
    removed = store.remove_line(line_id)
    if removed:
        save_tech_card(db, product_id, store)
    return removed


def set_tech_card_quantity(db: Session, product_id: int, line_id: str, quantity) -> Decimal:
    store = load_tech_card(db, product_id)
    line = store.set_quantity(line_id, quantity)
    save_tech_card(db, product_id, store)
    return line.quantity


def commit_tech_card_quantity_text(db: Session, product_id: int, line_id: str, text: str) -> Decimal:
    return set_tech_card_quantity(db, product_id, line_id, parse_quantity_text(text))


def import_tech_card(db: Session, product_id: int, filename: str, content: bytes) -> ImportReport:
    rows = read_tabular_file(filename, content)
    store = load_tech_card(db, product_id)
    report = import_rows(
        store,
        rows,
        catalog_service.materials_by_article(db),
        max_rows=settings.import_max_rows,
    )
    if report.merged or report.appended:
        save_tech_card(db, product_id, store)
    return report
