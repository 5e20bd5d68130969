"""
Material Routes for the Fleet Dashboard
=======================================

Endpoints:
----------
- GET /materials: List materials by name
- POST /materials: Add a material (409 if the name exists)
- GET /materials/{id}: Material details
- DELETE /materials/{id}: Remove a material
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import FleetError
from ..schemas.materials import MaterialCreate, MaterialOut
from ..services import materials as material_service


logger = logging.getLogger(__name__)

# Router definition
materials_router = APIRouter(prefix="/materials", tags=["Materials"])


@materials_router.get("", response_model=List[MaterialOut])
def list_materials(db: Session = Depends(get_db)) -> List[MaterialOut]:
    try:
        materials = material_service.list_materials(db)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return [MaterialOut.model_validate(m) for m in materials]


@materials_router.post("", response_model=MaterialOut, status_code=201)
def create_material(payload: MaterialCreate, db: Session = Depends(get_db)) -> MaterialOut:
    try:
        material = material_service.create_material(db, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return MaterialOut.model_validate(material)


@materials_router.get("/{material_id}", response_model=MaterialOut)
def get_material(material_id: int, db: Session = Depends(get_db)) -> MaterialOut:
    try:
        material = material_service.get_material(db, material_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return MaterialOut.model_validate(material)


@materials_router.delete("/{material_id}", status_code=204)
def delete_material(material_id: int, db: Session = Depends(get_db)) -> None:
    try:
        material_service.delete_material(db, material_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
