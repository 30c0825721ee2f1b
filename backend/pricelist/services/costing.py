from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DerivedCostRow:
    line_id: str
    material_id: int | None
    article: str
    name: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    line_total: Decimal
    resolved: bool


@dataclass(frozen=True)
class ProductCostSummary:
    rows: tuple[DerivedCostRow, ...]
    material_cost: Decimal
    work_cost: Decimal
    markup_multiplier: Decimal
    total: Decimal
    unresolved_line_ids: tuple[str, ...]

    @property
    def has_unresolved(self) -> bool:
        return bool(self.unresolved_line_ids)


def as_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def line_total(quantity, unit_price) -> Decimal:
    return as_decimal(quantity) * as_decimal(unit_price)


def derive_cost_row(line, materials: Mapping) -> DerivedCostRow:
    material = materials.get(line.material_id) if line.material_id is not None else None
    quantity = as_decimal(line.quantity)
    if material is None:
        return DerivedCostRow(
            line_id=line.line_id,
            material_id=line.material_id,
            article="",
            name="",
            quantity=quantity,
            unit="",
            unit_price=ZERO,
            line_total=ZERO,
            resolved=False,
        )
    unit_price = as_decimal(material.unit_price)
    return DerivedCostRow(
        line_id=line.line_id,
        material_id=line.material_id,
        article=material.article or "",
        name=material.name or "",
        quantity=quantity,
        unit=material.unit or "",
        unit_price=unit_price,
        line_total=line_total(quantity, unit_price),
        resolved=True,
    )


def work_cost_for(product_type, finish_type) -> Decimal:
    product_work = as_decimal(product_type.work_cost) if product_type is not None else ZERO
    finish_work = as_decimal(finish_type.work_cost) if finish_type is not None else ZERO
    return product_work + finish_work


def markup_multiplier_for(product_type, finish_type) -> Decimal:
    # Markups add up as flat percentages of the base; they never compound.
    product_markup = as_decimal(product_type.markup_percent) if product_type is not None else ZERO
    finish_markup = as_decimal(finish_type.markup_percent) if finish_type is not None else ZERO
    return Decimal("1") + (product_markup + finish_markup) / HUNDRED


def compute_cost_summary(
    lines: Iterable,
    materials: Mapping,
    product_type=None,
    finish_type=None,
) -> ProductCostSummary:
    """Total cost of one tech card.

    ``lines`` are tech-card lines in display order, ``materials`` maps material
    id to a material row. Lines whose material is missing from ``materials``
    cost nothing and are listed in ``unresolved_line_ids``; an absent product
    or finish type contributes no markup and no work cost. Nothing is rounded
    here.
    """
    rows = tuple(derive_cost_row(line, materials) for line in lines)

    material_cost = ZERO
    for row in rows:
        material_cost += row.line_total

    work_cost = work_cost_for(product_type, finish_type)
    multiplier = markup_multiplier_for(product_type, finish_type)
    return ProductCostSummary(
        rows=rows,
        material_cost=material_cost,
        work_cost=work_cost,
        markup_multiplier=multiplier,
        total=material_cost * multiplier + work_cost,
        unresolved_line_ids=tuple(row.line_id for row in rows if not row.resolved),
    )
