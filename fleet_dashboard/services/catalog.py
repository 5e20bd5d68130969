"""
Catalog Lookup Service
======================

Read-only access to the vehicles, POIs and materials the task decomposer
needs, and conversion of those rows into an immutable CatalogSnapshot.

Lookup Errors:
--------------
A failing lookup aborts decomposition with InternalError. An empty result
is not an error: the planner falls back to its defaults when nothing
matches.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Material, PointOfInterest, Vehicle
from ..planning.types import (
    CatalogSnapshot,
    MaterialRecord,
    PoiRecord,
    Position,
    VehicleRecord,
)
from .helpers import store_errors


logger = logging.getLogger(__name__)


def find_vehicle_by_id(db: Session, vehicle_id: Optional[str]) -> Optional[Vehicle]:
    if not vehicle_id:
        return None
    return db.get(Vehicle, vehicle_id)


def list_materials(db: Session) -> List[Material]:
    """All materials in catalog (insertion) order."""
    return db.query(Material).order_by(Material.id).all()


def list_pois(db: Session) -> List[PointOfInterest]:
    """All POIs in catalog (creation) order."""
    return (
        db.query(PointOfInterest)
        .order_by(PointOfInterest.created_at, PointOfInterest.id)
        .all()
    )


def vehicle_to_record(vehicle: Vehicle) -> VehicleRecord:
    return VehicleRecord(
        id=vehicle.id,
        name=vehicle.name,
        type=vehicle.type,
        capacity=vehicle.capacity,
    )


def poi_to_record(poi: PointOfInterest) -> PoiRecord:
    return PoiRecord(
        id=poi.id,
        name=poi.name,
        type=poi.type,
        position=Position(lat=poi.lat, lng=poi.lng),
        materials=tuple(poi.materials or ()),
        capacity=poi.capacity,
        current_amount=poi.current_amount,
        status=poi.status,
    )


def material_to_record(material: Material) -> MaterialRecord:
    return MaterialRecord(name=material.name, type=material.type)


def load_catalog(db: Session, vehicle_id: Optional[str] = None) -> CatalogSnapshot:
    """
    Snapshot the catalog for one decomposition.

    Only the requested vehicle is loaded; the planner never looks at the
    rest of the fleet.

    Raises:
        InternalError: if any lookup fails
    """
    with store_errors(db, "load site catalog"):
        vehicle = find_vehicle_by_id(db, vehicle_id)
        materials = list_materials(db)
        pois = list_pois(db)

    snapshot = CatalogSnapshot(
        vehicles=(vehicle_to_record(vehicle),) if vehicle else (),
        pois=tuple(poi_to_record(p) for p in pois),
        materials=tuple(material_to_record(m) for m in materials),
    )
    logger.debug(
        "Loaded catalog snapshot: vehicle=%s pois=%d materials=%d",
        vehicle_id if vehicle else None,
        len(snapshot.pois),
        len(snapshot.materials),
    )
    return snapshot
