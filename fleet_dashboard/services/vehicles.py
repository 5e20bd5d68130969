"""
Vehicle Service
===============

Fleet CRUD plus the simulated move used by the map.

Load Invariant:
---------------
current_load <= capacity is checked against the stored row on every
create and update; a violation raises ValidationFailure and nothing is
written.

Simulated Move:
---------------
A move sets the destination, marks the vehicle as moving and stores a
three-point route: the current position, a waypoint jittered within
+/-0.005 degrees of the segment midpoint, and the destination. Nothing
drives the vehicle along the route; clients update the position as it
progresses.
"""

import logging
import random
from typing import List, Optional

from sqlalchemy.orm import Session

from ..errors import NotFoundError, ValidationFailure
from ..models import Vehicle
from ..schemas.common import Position
from ..schemas.vehicles import VehicleCreate, VehicleUpdate
from .helpers import new_entity_id, store_errors


logger = logging.getLogger(__name__)

WAYPOINT_JITTER = 0.005  # degrees


def _check_load(current_load: float, capacity: float) -> None:
    if current_load > capacity:
        raise ValidationFailure(
            f"Current load ({current_load} tons) exceeds capacity ({capacity} tons)"
        )


def list_vehicles(db: Session, status: Optional[str] = None, vehicle_type: Optional[str] = None) -> List[Vehicle]:
    """Vehicles, most recently updated first."""
    query = db.query(Vehicle)
    if status:
        query = query.filter(Vehicle.status == status)
    if vehicle_type:
        query = query.filter(Vehicle.type == vehicle_type)
    with store_errors(db, "list vehicles"):
        return query.order_by(Vehicle.last_update.desc(), Vehicle.id).all()


def get_vehicle(db: Session, vehicle_id: str) -> Vehicle:
    with store_errors(db, "load vehicle"):
        vehicle = db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFoundError("Vehicle", vehicle_id)
    return vehicle


def create_vehicle(db: Session, payload: VehicleCreate) -> Vehicle:
    coordinate = payload.coordinate
    vehicle = Vehicle(
        id=new_entity_id("vehicle"),
        name=payload.name,
        type=payload.type,
        lat=coordinate.lat,
        lng=coordinate.lng,
        status="idle",
        capacity=payload.capacity,
        current_load=0.0,
        battery_level=100.0,
        route=[],
        extra_metadata=payload.metadata,
    )
    db.add(vehicle)
    with store_errors(db, "create vehicle"):
        db.commit()
    db.refresh(vehicle)

    logger.info("Created vehicle: %s (id=%s)", vehicle.name, vehicle.id)
    return vehicle


def update_vehicle(db: Session, vehicle_id: str, payload: VehicleUpdate) -> Vehicle:
    """
    Apply a partial update.

    Raises:
        NotFoundError: if the vehicle does not exist
        ValidationFailure: if the new load exceeds capacity
    """
    vehicle = get_vehicle(db, vehicle_id)

    if payload.current_load is not None:
        _check_load(payload.current_load, vehicle.capacity)

    coordinate = payload.coordinate
    if coordinate is not None:
        vehicle.lat = coordinate.lat
        vehicle.lng = coordinate.lng
    if payload.status is not None:
        vehicle.status = payload.status
    if payload.current_load is not None:
        vehicle.current_load = payload.current_load
    if payload.battery_level is not None:
        vehicle.battery_level = payload.battery_level
    if "destination" in payload.model_fields_set:
        vehicle.destination = payload.destination.model_dump() if payload.destination else None
    if payload.route is not None:
        vehicle.route = [point.model_dump() for point in payload.route]

    with store_errors(db, "update vehicle"):
        db.commit()
    db.refresh(vehicle)

    logger.info("Updated vehicle %s", vehicle.id)
    return vehicle


def plan_route(start: Position, destination: Position) -> List[dict]:
    """Current position, a jittered midpoint waypoint, then the destination."""
    waypoint = {
        "lat": (start.lat + destination.lat) / 2 + random.uniform(-WAYPOINT_JITTER, WAYPOINT_JITTER),
        "lng": (start.lng + destination.lng) / 2 + random.uniform(-WAYPOINT_JITTER, WAYPOINT_JITTER),
    }
    return [start.model_dump(), waypoint, destination.model_dump()]


def move_vehicle(db: Session, vehicle_id: str, destination: Position) -> Vehicle:
    vehicle = get_vehicle(db, vehicle_id)

    start = Position(lat=vehicle.lat, lng=vehicle.lng)
    vehicle.destination = destination.model_dump()
    vehicle.route = plan_route(start, destination)
    vehicle.status = "moving"

    with store_errors(db, "move vehicle"):
        db.commit()
    db.refresh(vehicle)

    logger.info(
        "Vehicle %s moving to (%s, %s)", vehicle.id, destination.lat, destination.lng
    )
    return vehicle


def delete_vehicle(db: Session, vehicle_id: str) -> None:
    vehicle = get_vehicle(db, vehicle_id)
    db.delete(vehicle)
    with store_errors(db, "delete vehicle"):
        db.commit()
    logger.info("Deleted vehicle %s", vehicle_id)
