"""
POI Service
===========

CRUD for points of interest. Enforces current_amount <= capacity against
the stored row, so a partial update that changes only one of the two is
still checked.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..errors import NotFoundError, ValidationFailure
from ..models import PointOfInterest
from ..schemas.pois import PoiCreate, PoiUpdate
from .helpers import new_entity_id, store_errors


logger = logging.getLogger(__name__)


def _check_amount(current_amount: float, capacity: float) -> None:
    if current_amount > capacity:
        raise ValidationFailure(
            f"Current amount ({current_amount} tons) exceeds capacity ({capacity} tons)"
        )


def list_pois(db: Session, poi_type: Optional[str] = None, status: Optional[str] = None) -> List[PointOfInterest]:
    """POIs ordered by name."""
    query = db.query(PointOfInterest)
    if poi_type:
        query = query.filter(PointOfInterest.type == poi_type)
    if status:
        query = query.filter(PointOfInterest.status == status)
    with store_errors(db, "list POIs"):
        return query.order_by(PointOfInterest.name).all()


def get_poi(db: Session, poi_id: str) -> PointOfInterest:
    with store_errors(db, "load POI"):
        poi = db.get(PointOfInterest, poi_id)
    if poi is None:
        raise NotFoundError("POI", poi_id)
    return poi


def create_poi(db: Session, payload: PoiCreate) -> PointOfInterest:
    _check_amount(payload.current_amount, payload.capacity)

    poi = PointOfInterest(
        id=new_entity_id("poi"),
        name=payload.name,
        type=payload.type,
        lat=payload.position.lat,
        lng=payload.position.lng,
        materials=list(payload.materials),
        capacity=payload.capacity,
        current_amount=payload.current_amount,
        status="operational",
        description=payload.description,
        extra_metadata=payload.metadata,
    )
    db.add(poi)
    with store_errors(db, "create POI"):
        db.commit()
    db.refresh(poi)

    logger.info("Created POI: %s (id=%s)", poi.name, poi.id)
    return poi


def update_poi(db: Session, poi_id: str, payload: PoiUpdate) -> PointOfInterest:
    poi = get_poi(db, poi_id)

    update_data = payload.model_dump(exclude_unset=True)
    capacity = update_data.get("capacity", poi.capacity)
    current_amount = update_data.get("current_amount", poi.current_amount)
    _check_amount(current_amount, capacity)

    position = update_data.pop("position", None)
    if position is not None:
        poi.lat = position["lat"]
        poi.lng = position["lng"]
    for field, value in update_data.items():
        setattr(poi, field, value)

    with store_errors(db, "update POI"):
        db.commit()
    db.refresh(poi)

    logger.info("Updated POI %s", poi.id)
    return poi


def delete_poi(db: Session, poi_id: str) -> None:
    poi = get_poi(db, poi_id)
    db.delete(poi)
    with store_errors(db, "delete POI"):
        db.commit()
    logger.info("Deleted POI %s", poi_id)
