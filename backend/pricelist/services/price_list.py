from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from pricelist.repositories import products as products_repo
from pricelist.repositories import tech_cards as tech_cards_repo
from pricelist.services import catalog as catalog_service
from pricelist.services.costing import compute_cost_summary

CSV_HEADER = (
    "Collection",
    "Product",
    "Article",
    "Product type",
    "Finish type",
    "Material cost",
    "Work cost",
    "Markup",
    "Total",
)
CENT = Decimal("0.01")


@dataclass(frozen=True)
class PriceListRow:
    product_id: int
    name: str
    article: str | None
    collection_name: str | None
    product_type_name: str | None
    finish_type_name: str | None
    material_cost: Decimal
    work_cost: Decimal
    markup_multiplier: Decimal
    total: Decimal
    unresolved_count: int


def _sort_key(product):
    collection = product.collection
    if collection is None:
        return (1, False, "", 0, product.name.lower(), product.id)
    order = list(collection.product_order or [])
    position = order.index(product.id) if product.id in order else len(order)
    return (0, not collection.pinned, collection.name.lower(), position, product.name.lower(), product.id)


def build_price_list(db: Session, include_archived: bool = False) -> list[PriceListRow]:
    """One priced row per product.

    Pinned collections come first, then the rest by name; products without a
    collection close the list. Inside a collection the stored product order
    applies and unlisted products follow by name.
    """
    products = products_repo.list_products(db)
    if not include_archived:
        products = [
            product
            for product in products
            if product.collection is None or not product.collection.is_archived
        ]
    products = sorted(products, key=_sort_key)
    lines_by_product = tech_cards_repo.list_lines_for_products(db, [product.id for product in products])
    materials = catalog_service.materials_by_id(db)

    rows: list[PriceListRow] = []
    for product in products:
        summary = compute_cost_summary(
            lines_by_product.get(product.id, []),
            materials,
            product.product_type,
            product.finish_type,
        )
        rows.append(
            PriceListRow(
                product_id=product.id,
                name=product.name,
                article=product.article,
                collection_name=product.collection.name if product.collection else None,
                product_type_name=product.product_type.name if product.product_type else None,
                finish_type_name=product.finish_type.name if product.finish_type else None,
                material_cost=summary.material_cost,
                work_cost=summary.work_cost,
                markup_multiplier=summary.markup_multiplier,
                total=summary.total,
                unresolved_count=len(summary.unresolved_line_ids),
            )
        )
    return rows


def _money(value: Decimal) -> str:
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


def price_list_csv(rows: list[PriceListRow]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(
            (
                row.collection_name or "",
                row.name,
                row.article or "",
                row.product_type_name or "",
                row.finish_type_name or "",
                _money(row.material_cost),
                _money(row.work_cost),
                format(row.markup_multiplier.normalize(), "f"),
                _money(row.total),
            )
        )
    return buffer.getvalue()
