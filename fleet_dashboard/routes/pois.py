"""
POI Routes for the Fleet Dashboard
==================================

Endpoints:
----------
- GET /pois: List POIs by name (filter by type, status)
- POST /pois: Create a POI
- GET /pois/{id}: POI details
- PUT /pois/{id}: Partial update (broadcasts poi-updated)
- DELETE /pois/{id}: Remove a POI

current_amount may never exceed capacity; a violating create or update is
rejected with 400.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import FleetError
from ..schemas.pois import PoiCreate, PoiOut, PoiUpdate
from ..services import pois as poi_service
from ..services.events import POI_UPDATED, EventPublisher, get_publisher


logger = logging.getLogger(__name__)

# Router definition
pois_router = APIRouter(prefix="/pois", tags=["Points of Interest"])


@pois_router.get("", response_model=List[PoiOut])
def list_pois(
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> List[PoiOut]:
    try:
        pois = poi_service.list_pois(db, poi_type=type, status=status)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return [PoiOut.model_validate(p) for p in pois]


@pois_router.post("", response_model=PoiOut, status_code=201)
def create_poi(payload: PoiCreate, db: Session = Depends(get_db)) -> PoiOut:
    try:
        poi = poi_service.create_poi(db, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return PoiOut.model_validate(poi)


@pois_router.get("/{poi_id}", response_model=PoiOut)
def get_poi(poi_id: str, db: Session = Depends(get_db)) -> PoiOut:
    try:
        poi = poi_service.get_poi(db, poi_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return PoiOut.model_validate(poi)


@pois_router.put("/{poi_id}", response_model=PoiOut)
def update_poi(
    poi_id: str,
    payload: PoiUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> PoiOut:
    try:
        poi = poi_service.update_poi(db, poi_id, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    poi_out = PoiOut.model_validate(poi)
    background_tasks.add_task(publisher.publish, POI_UPDATED, poi_out.model_dump(mode="json"))
    return poi_out


@pois_router.delete("/{poi_id}", status_code=204)
def delete_poi(poi_id: str, db: Session = Depends(get_db)) -> None:
    try:
        poi_service.delete_poi(db, poi_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
