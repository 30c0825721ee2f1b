from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from pricelist.core.config import settings
from pricelist.db.session import get_db
from pricelist.schemas.price_list import PriceListRead, PriceListRowRead
from pricelist.services.price_list import build_price_list, price_list_csv

router = APIRouter(tags=["price-list"])


@router.get("/api/price-list", response_model=PriceListRead)
def get_price_list(include_archived: bool = False, db: Session = Depends(get_db)) -> PriceListRead:
    rows = build_price_list(db, include_archived=include_archived)
    return PriceListRead(
        currency=settings.currency,
        items=[PriceListRowRead.model_validate(row) for row in rows],
    )


@router.get("/api/price-list.csv")
def download_price_list(include_archived: bool = False, db: Session = Depends(get_db)) -> Response:
    content = price_list_csv(build_price_list(db, include_archived=include_archived))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="price-list.csv"'},
    )
