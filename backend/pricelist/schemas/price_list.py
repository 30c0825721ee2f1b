from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class PriceListRowRead(BaseModel):
    product_id: int
    name: str
    article: str | None = None
    collection_name: str | None = None
    product_type_name: str | None = None
    finish_type_name: str | None = None
    material_cost: Decimal
    work_cost: Decimal
    markup_multiplier: Decimal
    total: Decimal
    unresolved_count: int = 0

    model_config = {"from_attributes": True}


class PriceListRead(BaseModel):
    currency: str
    items: list[PriceListRowRead]
