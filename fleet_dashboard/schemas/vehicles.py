"""
Vehicle Schemas for the Fleet Dashboard
=======================================

Pydantic models for the fleet endpoints.

Endpoint Coverage:
------------------
- GET /vehicles: List vehicles, most recently updated first
- POST /vehicles: Register a vehicle
- GET /vehicles/{id}: Vehicle details
- PUT /vehicles/{id}: Update position, status, load, battery or route
- POST /vehicles/{id}/move: Simulated move toward a destination
- DELETE /vehicles/{id}: Remove a vehicle

Position vs Location:
---------------------
Create and update requests accept the coordinate as either `position` or
`location`; `position` wins when both are sent.

Load Invariant:
---------------
current_load may never exceed capacity. The schemas only bound the values;
the comparison against the stored capacity happens in the vehicle service.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from .common import Position, VehicleStatus, VehicleType


class VehicleOut(BaseModel):
    """
    Response model for a vehicle.

    Attributes:
        id: Unique identifier (e.g., "truck-001")
        name: Display name
        type: Vehicle class
        position: Current coordinate
        status: idle, moving, working, maintenance or offline
        capacity: Payload capacity in tons
        current_load: Tons currently carried
        battery_level: Percent, 0-100
        destination: Coordinate the vehicle is heading to, if any
        route: Waypoints toward the destination
        metadata: Manufacturer, model, maintenance dates, etc.
        battery_status: good, fair, low or critical
        load_percentage: current_load as a percentage of capacity
        last_update: Refreshed on every change
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    position: Position
    status: str
    capacity: float
    current_load: float
    battery_level: float
    destination: Optional[Position] = None
    route: List[Position] = []
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("extra_metadata", "metadata"),
    )
    battery_status: str
    load_percentage: int
    last_update: Optional[datetime] = None


class VehicleCreate(BaseModel):
    """
    Request model for registering a vehicle.

    Example:
        {
            "name": "Mining Truck Gamma",
            "type": "haul_truck",
            "position": {"lat": 40.7579, "lng": -111.8873},
            "capacity": 120
        }
    """
    name: str = Field(..., min_length=1)
    type: VehicleType
    position: Optional[Position] = None
    location: Optional[Position] = None
    capacity: float = Field(100.0, ge=0)
    metadata: Dict[str, Any] = {}

    @model_validator(mode="after")
    def _require_coordinate(self):
        if self.position is None and self.location is None:
            raise ValueError("position or location is required")
        return self

    @property
    def coordinate(self) -> Position:
        return self.position or self.location


class VehicleUpdate(BaseModel):
    """
    Request model for updating a vehicle. Only provided fields are changed.

    Example:
        {"status": "working", "current_load": 60, "battery_level": 72}
    """
    position: Optional[Position] = None
    location: Optional[Position] = None
    status: Optional[VehicleStatus] = None
    current_load: Optional[float] = Field(None, ge=0)
    battery_level: Optional[float] = Field(None, ge=0, le=100)
    destination: Optional[Position] = None
    route: Optional[List[Position]] = None

    @property
    def coordinate(self) -> Optional[Position]:
        return self.position or self.location


class VehicleMoveRequest(BaseModel):
    """Request model for a simulated move."""
    destination: Position
