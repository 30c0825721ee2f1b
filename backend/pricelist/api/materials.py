from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from pricelist.db.session import get_db
from pricelist.schemas.material import MaterialCreate, MaterialRead, MaterialUpdate
from pricelist.services import catalog as catalog_service

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.get("", response_model=list[MaterialRead])
def list_materials(db: Session = Depends(get_db)) -> list[MaterialRead]:
    return [MaterialRead.model_validate(material) for material in catalog_service.list_materials(db)]


@router.get("/{material_id}", response_model=MaterialRead)
def get_material(material_id: int, db: Session = Depends(get_db)) -> MaterialRead:
    material = catalog_service.get_material(db, material_id)
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    return MaterialRead.model_validate(material)


@router.post("", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
def create_material(payload: MaterialCreate, db: Session = Depends(get_db)) -> MaterialRead:
    try:
        material = catalog_service.create_material(db, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MaterialRead.model_validate(material)


@router.put("/{material_id}", response_model=MaterialRead)
def update_material(material_id: int, payload: MaterialUpdate, db: Session = Depends(get_db)) -> MaterialRead:
    if not catalog_service.get_material(db, material_id):
        raise HTTPException(status_code=404, detail="Material not found")
    try:
        material = catalog_service.update_material(db, material_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MaterialRead.model_validate(material)


@router.delete("/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material(material_id: int, db: Session = Depends(get_db)) -> Response:
    if not catalog_service.get_material(db, material_id):
        raise HTTPException(status_code=404, detail="Material not found")
    catalog_service.delete_material(db, material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
