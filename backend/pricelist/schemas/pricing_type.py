from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class PricingTypeBase(BaseModel):
    name: str = Field(..., min_length=1)
    markup_percent: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=2)
    work_cost: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = " ".join(value.split())
        if not cleaned:
            raise ValueError("Name is required.")
        return cleaned


class ProductTypeCreate(PricingTypeBase):
    pass


class ProductTypeUpdate(PricingTypeBase):
    pass


class FinishTypeCreate(PricingTypeBase):
    pass


class FinishTypeUpdate(PricingTypeBase):
    pass


class PricingTypeRead(BaseModel):
    id: int
    name: str
    markup_percent: Decimal = Field(..., examples=["10.00"])
    work_cost: Decimal = Field(..., examples=["1000.00"])
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProductTypeRead(PricingTypeRead):
    pass


class FinishTypeRead(PricingTypeRead):
    pass
