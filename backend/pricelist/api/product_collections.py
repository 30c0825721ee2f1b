from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from pricelist.db.session import get_db
from pricelist.schemas.product import CollectionCreate, CollectionRead, CollectionUpdate
from pricelist.services import catalog as catalog_service

router = APIRouter(prefix="/api/collections", tags=["collections"])


@router.get("", response_model=list[CollectionRead])
def list_collections(db: Session = Depends(get_db)) -> list[CollectionRead]:
    return [CollectionRead.model_validate(row) for row in catalog_service.list_collections(db)]


@router.get("/{collection_id}", response_model=CollectionRead)
def get_collection(collection_id: int, db: Session = Depends(get_db)) -> CollectionRead:
    collection = catalog_service.get_collection(db, collection_id)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return CollectionRead.model_validate(collection)


@router.post("", response_model=CollectionRead, status_code=status.HTTP_201_CREATED)
def create_collection(payload: CollectionCreate, db: Session = Depends(get_db)) -> CollectionRead:
    try:
        collection = catalog_service.create_collection(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return CollectionRead.model_validate(collection)


@router.put("/{collection_id}", response_model=CollectionRead)
def update_collection(
    collection_id: int, payload: CollectionUpdate, db: Session = Depends(get_db)
) -> CollectionRead:
    if not catalog_service.get_collection(db, collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    try:
        collection = catalog_service.update_collection(db, collection_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return CollectionRead.model_validate(collection)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_collection(collection_id: int, db: Session = Depends(get_db)) -> Response:
    if not catalog_service.get_collection(db, collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
    catalog_service.delete_collection(db, collection_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
