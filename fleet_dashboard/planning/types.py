"""
Planning Types.

Immutable catalog snapshots consumed by the decomposer, and the plan
structures it produces. Nothing in here touches the database: the catalog
service builds a CatalogSnapshot from ORM rows and hands it in.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Position:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class VehicleRecord:
    id: str
    name: str
    type: str
    capacity: float


@dataclass(frozen=True)
class PoiRecord:
    id: str
    name: str
    type: str
    position: Position
    materials: Tuple[str, ...] = ()
    capacity: float = 0.0
    current_amount: float = 0.0
    status: str = "operational"


@dataclass(frozen=True)
class MaterialRecord:
    name: str
    type: str = "ore"


@dataclass(frozen=True)
class CatalogSnapshot:
    """Read-only view of the fleet and site at decomposition time."""
    vehicles: Tuple[VehicleRecord, ...] = ()
    pois: Tuple[PoiRecord, ...] = ()
    materials: Tuple[MaterialRecord, ...] = ()

    def find_vehicle(self, vehicle_id: Optional[str]) -> Optional[VehicleRecord]:
        if not vehicle_id:
            return None
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def find_poi(self, predicate: Callable[[PoiRecord], bool]) -> Optional[PoiRecord]:
        for poi in self.pois:
            if predicate(poi):
                return poi
        return None


EMPTY_CATALOG = CatalogSnapshot()


@dataclass
class StepParameters:
    """Typed parameter bag carried by every planned step."""
    vehicle_id: Optional[str]
    material: Optional[str] = None
    amount: Optional[float] = None
    destination: Optional[Position] = None
    source_id: Optional[str] = None
    destination_id: Optional[str] = None
    instruction: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for storage, dropping unset fields (vehicle_id is always kept)."""
        data: Dict[str, Any] = {"vehicle_id": self.vehicle_id}
        if self.material is not None:
            data["material"] = self.material
        if self.amount is not None:
            data["amount"] = self.amount
        if self.destination is not None:
            data["destination"] = self.destination.to_dict()
        if self.source_id is not None:
            data["source_id"] = self.source_id
        if self.destination_id is not None:
            data["destination_id"] = self.destination_id
        if self.instruction is not None:
            data["instruction"] = self.instruction
        return data


@dataclass
class PlannedStep:
    step_number: int
    action: str
    description: str
    estimated_duration: int
    parameters: StepParameters
    status: str = "pending"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class Decomposition:
    """Result of decomposing one instruction."""
    strategy: str
    steps: List[PlannedStep]
    estimated_duration: int
    priority: str
    summary: str
