from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from pricelist.db.session import get_db
from pricelist.schemas.pricing_type import (
    FinishTypeCreate,
    FinishTypeRead,
    FinishTypeUpdate,
    ProductTypeCreate,
    ProductTypeRead,
    ProductTypeUpdate,
)
from pricelist.services import catalog as catalog_service

product_types_router = APIRouter(prefix="/api/product-types", tags=["product-types"])
finish_types_router = APIRouter(prefix="/api/finish-types", tags=["finish-types"])


@product_types_router.get("", response_model=list[ProductTypeRead])
def list_product_types(db: Session = Depends(get_db)) -> list[ProductTypeRead]:
    return [ProductTypeRead.model_validate(row) for row in catalog_service.list_product_types(db)]


@product_types_router.get("/{product_type_id}", response_model=ProductTypeRead)
def get_product_type(product_type_id: int, db: Session = Depends(get_db)) -> ProductTypeRead:
    row = catalog_service.get_product_type(db, product_type_id)
    if not row:
        raise HTTPException(status_code=404, detail="Product type not found")
    return ProductTypeRead.model_validate(row)


@product_types_router.post("", response_model=ProductTypeRead, status_code=status.HTTP_201_CREATED)
def create_product_type(payload: ProductTypeCreate, db: Session = Depends(get_db)) -> ProductTypeRead:
    try:
        row = catalog_service.create_product_type(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ProductTypeRead.model_validate(row)


@product_types_router.put("/{product_type_id}", response_model=ProductTypeRead)
def update_product_type(
    product_type_id: int, payload: ProductTypeUpdate, db: Session = Depends(get_db)
) -> ProductTypeRead:
    if not catalog_service.get_product_type(db, product_type_id):
        raise HTTPException(status_code=404, detail="Product type not found")
    try:
        row = catalog_service.update_product_type(db, product_type_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ProductTypeRead.model_validate(row)


@product_types_router.delete("/{product_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product_type(product_type_id: int, db: Session = Depends(get_db)) -> Response:
    if not catalog_service.get_product_type(db, product_type_id):
        raise HTTPException(status_code=404, detail="Product type not found")
    catalog_service.delete_product_type(db, product_type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@finish_types_router.get("", response_model=list[FinishTypeRead])
def list_finish_types(db: Session = Depends(get_db)) -> list[FinishTypeRead]:
    return [FinishTypeRead.model_validate(row) for row in catalog_service.list_finish_types(db)]


@finish_types_router.get("/{finish_type_id}", response_model=FinishTypeRead)
def get_finish_type(finish_type_id: int, db: Session = Depends(get_db)) -> FinishTypeRead:
    row = catalog_service.get_finish_type(db, finish_type_id)
    if not row:
        raise HTTPException(status_code=404, detail="Finish type not found")
    return FinishTypeRead.model_validate(row)


@finish_types_router.post("", response_model=FinishTypeRead, status_code=status.HTTP_201_CREATED)
def create_finish_type(payload: FinishTypeCreate, db: Session = Depends(get_db)) -> FinishTypeRead:
    try:
        row = catalog_service.create_finish_type(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return FinishTypeRead.model_validate(row)


@finish_types_router.put("/{finish_type_id}", response_model=FinishTypeRead)
def update_finish_type(
    finish_type_id: int, payload: FinishTypeUpdate, db: Session = Depends(get_db)
) -> FinishTypeRead:
    if not catalog_service.get_finish_type(db, finish_type_id):
        raise HTTPException(status_code=404, detail="Finish type not found")
    try:
        row = catalog_service.update_finish_type(db, finish_type_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return FinishTypeRead.model_validate(row)


@finish_types_router.delete("/{finish_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_finish_type(finish_type_id: int, db: Session = Depends(get_db)) -> Response:
    if not catalog_service.get_finish_type(db, finish_type_id):
        raise HTTPException(status_code=404, detail="Finish type not found")
    catalog_service.delete_finish_type(db, finish_type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
