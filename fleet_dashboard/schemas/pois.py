"""
POI Schemas for the Fleet Dashboard
===================================

Pydantic models for points of interest: storage zones, crushers, loading
docks and the other fixed site locations shown on the map.

Inventory Invariant:
--------------------
current_amount may never exceed capacity. The check runs in the POI
service against the stored row, so a partial update that only changes one
of the two values is still validated.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import PoiStatus, PoiType, Position


class PoiOut(BaseModel):
    """
    Response model for a POI.

    Attributes:
        id: Unique identifier (e.g., "zone-a", "crusher-01")
        name: Display name
        type: storage_zone, crusher, loading_dock, workshop, office, parking or fuel_station
        position: Map coordinate
        materials: Material names held or accepted here
        capacity: Capacity in tons
        current_amount: Tons currently held
        status: operational, maintenance, offline, full or empty
        utilization_percentage: current_amount as a percentage of capacity
        available_space: capacity - current_amount
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    position: Position
    materials: List[str] = []
    capacity: float
    current_amount: float
    status: str
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("extra_metadata", "metadata"),
    )
    utilization_percentage: int
    available_space: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PoiCreate(BaseModel):
    """
    Request model for creating a POI.

    Example:
        {
            "name": "Zone D - Overflow",
            "type": "storage_zone",
            "position": {"lat": 40.7669, "lng": -111.8823},
            "materials": ["Material A"],
            "capacity": 600
        }
    """
    name: str = Field(..., min_length=1)
    type: PoiType
    position: Position
    materials: List[str] = []
    capacity: float = Field(1000.0, ge=0)
    current_amount: float = Field(0.0, ge=0)
    description: str = ""
    metadata: Dict[str, Any] = {}


class PoiUpdate(BaseModel):
    """Request model for updating a POI. Only provided fields are changed."""
    name: Optional[str] = None
    type: Optional[PoiType] = None
    position: Optional[Position] = None
    materials: Optional[List[str]] = None
    capacity: Optional[float] = Field(None, ge=0)
    current_amount: Optional[float] = Field(None, ge=0)
    status: Optional[PoiStatus] = None
    description: Optional[str] = None
