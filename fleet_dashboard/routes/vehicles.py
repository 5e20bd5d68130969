"""
Vehicle Routes for the Fleet Dashboard
======================================

Endpoints:
----------
- GET /vehicles: List vehicles (filter by status, type)
- POST /vehicles: Register a vehicle
- GET /vehicles/{id}: Vehicle details
- PUT /vehicles/{id}: Update position, status, load, battery or route
- POST /vehicles/{id}/move: Simulated move toward a destination
- DELETE /vehicles/{id}: Remove a vehicle

Updates and moves broadcast vehicle-updated.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import FleetError
from ..schemas.vehicles import VehicleCreate, VehicleMoveRequest, VehicleOut, VehicleUpdate
from ..services import vehicles as vehicle_service
from ..services.events import VEHICLE_UPDATED, EventPublisher, get_publisher


logger = logging.getLogger(__name__)

# Router definition
vehicles_router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@vehicles_router.get("", response_model=List[VehicleOut])
def list_vehicles(
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> List[VehicleOut]:
    try:
        vehicles = vehicle_service.list_vehicles(db, status=status, vehicle_type=type)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return [VehicleOut.model_validate(v) for v in vehicles]


@vehicles_router.post("", response_model=VehicleOut, status_code=201)
def create_vehicle(payload: VehicleCreate, db: Session = Depends(get_db)) -> VehicleOut:
    try:
        vehicle = vehicle_service.create_vehicle(db, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return VehicleOut.model_validate(vehicle)


@vehicles_router.get("/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)) -> VehicleOut:
    try:
        vehicle = vehicle_service.get_vehicle(db, vehicle_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return VehicleOut.model_validate(vehicle)


@vehicles_router.put("/{vehicle_id}", response_model=VehicleOut)
def update_vehicle(
    vehicle_id: str,
    payload: VehicleUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> VehicleOut:
    try:
        vehicle = vehicle_service.update_vehicle(db, vehicle_id, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    vehicle_out = VehicleOut.model_validate(vehicle)
    background_tasks.add_task(publisher.publish, VEHICLE_UPDATED, vehicle_out.model_dump(mode="json"))
    return vehicle_out


@vehicles_router.post("/{vehicle_id}/move", response_model=VehicleOut)
def move_vehicle(
    vehicle_id: str,
    payload: VehicleMoveRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> VehicleOut:
    """Set a destination and a three-point route; the vehicle becomes moving."""
    try:
        vehicle = vehicle_service.move_vehicle(db, vehicle_id, payload.destination)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    vehicle_out = VehicleOut.model_validate(vehicle)
    background_tasks.add_task(publisher.publish, VEHICLE_UPDATED, vehicle_out.model_dump(mode="json"))
    return vehicle_out


@vehicles_router.delete("/{vehicle_id}", status_code=204)
def delete_vehicle(vehicle_id: str, db: Session = Depends(get_db)) -> None:
    try:
        vehicle_service.delete_vehicle(db, vehicle_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
