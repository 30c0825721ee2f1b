from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from pricelist.core.errors import ImportParseFailure, LineNotFoundError, ValidationError
from pricelist.db.session import get_db
from pricelist.schemas.product import ProductCreate, ProductRead, ProductUpdate
from pricelist.schemas.tech_card import (
    CostRowRead,
    CostSummaryRead,
    ImportReportRead,
    QuantityUpdate,
    TechCardLineCreate,
    TechCardLineCreated,
    TechCardRead,
)
from pricelist.services import products as products_service
from pricelist.services.costing import ProductCostSummary

router = APIRouter(prefix="/api/products", tags=["products"])
logger = logging.getLogger("pricelist.api")


def _require_product(db: Session, product_id: int):
    product = products_service.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _serialize_tech_card(product_id: int, summary: ProductCostSummary) -> TechCardRead:
    return TechCardRead(
        product_id=product_id,
        rows=[CostRowRead.model_validate(row) for row in summary.rows],
        summary=CostSummaryRead(
            material_cost=summary.material_cost,
            work_cost=summary.work_cost,
            markup_multiplier=summary.markup_multiplier,
            total=summary.total,
            unresolved_line_ids=list(summary.unresolved_line_ids),
        ),
    )


@router.get("", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)) -> list[ProductRead]:
    return [ProductRead.model_validate(product) for product in products_service.list_products(db)]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)) -> ProductRead:
    return ProductRead.model_validate(_require_product(db, product_id))


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)) -> ProductRead:
    try:
        product = products_service.create_product(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)) -> ProductRead:
    _require_product(db, product_id)
    try:
        product = products_service.update_product(db, product_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: Session = Depends(get_db)) -> Response:
    _require_product(db, product_id)
    products_service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/tech-card", response_model=TechCardRead)
def get_tech_card(product_id: int, db: Session = Depends(get_db)) -> TechCardRead:
    _require_product(db, product_id)
    return _serialize_tech_card(product_id, products_service.compute_product_cost(db, product_id))


@router.post(
    "/{product_id}/tech-card/lines",
    response_model=TechCardLineCreated,
    status_code=status.HTTP_201_CREATED,
)
def add_tech_card_line(
    product_id: int, payload: TechCardLineCreate, db: Session = Depends(get_db)
) -> TechCardLineCreated:
    _require_product(db, product_id)
    try:
        line_id = products_service.add_tech_card_line(
            db, product_id, payload.material_id, payload.quantity
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TechCardLineCreated(line_id=line_id)


@router.delete("/{product_id}/tech-card/lines/{line_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_tech_card_line(product_id: int, line_id: str, db: Session = Depends(get_db)) -> Response:
    _require_product(db, product_id)
    products_service.remove_tech_card_line(db, product_id, line_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{product_id}/tech-card/lines/{line_id}/quantity", response_model=TechCardRead)
def update_tech_card_quantity(
    product_id: int,
    line_id: str,
    payload: QuantityUpdate,
    db: Session = Depends(get_db),
) -> TechCardRead:
    _require_product(db, product_id)
    try:
        if payload.text is not None:
            products_service.commit_tech_card_quantity_text(db, product_id, line_id, payload.text)
        else:
            products_service.set_tech_card_quantity(db, product_id, line_id, payload.quantity)
    except LineNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        logger.info("Rejected quantity for line %s of product %s: %s", line_id, product_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialize_tech_card(product_id, products_service.compute_product_cost(db, product_id))


@router.post("/{product_id}/tech-card/import", response_model=ImportReportRead)
def import_tech_card(
    product_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
) -> ImportReportRead:
    _require_product(db, product_id)
    content = file.file.read()
    try:
        report = products_service.import_tech_card(db, product_id, file.filename or "", content)
    except ImportParseFailure as exc:
        logger.warning("Tech card import rejected for product %s: %s", product_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info(
        "Tech card import for product %s: merged=%s appended=%s unresolved=%s",
        product_id,
        report.merged,
        report.appended,
        report.unresolved,
    )
    return ImportReportRead.model_validate(report)
