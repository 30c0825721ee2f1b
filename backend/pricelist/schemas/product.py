from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class CollectionCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    group_name: str | None = None
    is_archived: bool = False
    pinned: bool = False
    cover_url: str | None = None
    product_order: list[int] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = " ".join(value.split())
        if not cleaned:
            raise ValueError("Collection name is required.")
        return cleaned

    @field_validator("description", "group_name", "cover_url")
    @classmethod
    def clean_optional(cls, value: str | None) -> str | None:
        return _clean_optional(value)

    @field_validator("product_order")
    @classmethod
    def dedupe_product_order(cls, value: list[int]) -> list[int]:
        return list(dict.fromkeys(value))


class CollectionUpdate(CollectionCreate):
    pass


class CollectionRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    group_name: str | None = None
    is_archived: bool = False
    pinned: bool = False
    cover_url: str | None = None
    product_order: list[int] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    article: str | None = None
    image_url: str | None = None
    collection_id: int | None = None
    product_type_id: int | None = None
    finish_type_id: int | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = " ".join(value.split())
        if not cleaned:
            raise ValueError("Product name is required.")
        return cleaned

    @field_validator("article", "image_url")
    @classmethod
    def clean_optional(cls, value: str | None) -> str | None:
        return _clean_optional(value)


class ProductUpdate(ProductCreate):
    pass


class ProductRead(BaseModel):
    id: int
    name: str = Field(..., examples=["Тумба Wasser 80"])
    article: str | None = Field(None, examples=["WS-080"])
    image_url: str | None = None
    collection_id: int | None = None
    product_type_id: int | None = None
    finish_type_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
