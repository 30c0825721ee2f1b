from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class TechCardLineCreate(BaseModel):
    material_id: int
    quantity: Decimal = Field(default=Decimal("0"), ge=0)


class TechCardLineCreated(BaseModel):
    line_id: str


class QuantityUpdate(BaseModel):
    quantity: Decimal | None = None
    text: str | None = None

    @model_validator(mode="after")
    def validate_one_source(self) -> "QuantityUpdate":
        if (self.quantity is None) == (self.text is None):
            raise ValueError("Provide either quantity or text.")
        return self


class CostRowRead(BaseModel):
    line_id: str
    material_id: int | None = None
    article: str
    name: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    line_total: Decimal
    resolved: bool

    model_config = {"from_attributes": True}


class CostSummaryRead(BaseModel):
    material_cost: Decimal
    work_cost: Decimal
    markup_multiplier: Decimal
    total: Decimal
    unresolved_line_ids: list[str] = Field(default_factory=list)


class TechCardRead(BaseModel):
    product_id: int
    rows: list[CostRowRead] = Field(default_factory=list)
    summary: CostSummaryRead


class ImportRowRead(BaseModel):
    row_number: int
    article: str
    quantity: Decimal | None = None
    status: str

    model_config = {"from_attributes": True}


class ImportReportRead(BaseModel):
    merged: int
    appended: int
    unresolved: int
    unresolved_articles: list[str] = Field(default_factory=list)
    header_skipped: bool = False
    rows: list[ImportRowRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}
