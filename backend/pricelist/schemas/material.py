from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class MaterialBase(BaseModel):
    name: str = Field(..., min_length=1)
    article: str | None = None
    unit: str = "шт"
    unit_price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = " ".join(value.split())
        if not cleaned:
            raise ValueError("Material name is required.")
        return cleaned

    @field_validator("article")
    @classmethod
    def validate_article(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, value: str) -> str:
        return value.strip() or "шт"


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(MaterialBase):
    pass


class MaterialRead(BaseModel):
    id: int
    name: str = Field(..., examples=["ЛДСП Egger 16 мм"])
    article: str | None = Field(None, examples=["EG-W1000-16"])
    unit: str = Field(..., examples=["м2"])
    unit_price: Decimal = Field(..., examples=["850.00"])
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
