"""
Schemas Package for the Fleet Dashboard
=======================================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **common.py**: Position and shared enumerations
- **vehicles.py**: Fleet schemas
- **pois.py**: Point-of-interest schemas
- **materials.py**: Material catalog schemas
- **tasks.py**: Task, step, approval and plan-preview schemas
- **chat.py**: Vehicle chat schemas

Naming Conventions:
-------------------
- *Out: Response models (e.g., VehicleOut) - what the API returns
- *Create: Request models for POST
- *Update: Request models for PUT (partial)
- *Request: Other request bodies (e.g., TaskApprovalRequest)

Response models use `model_config = ConfigDict(from_attributes=True)` so
they can be built straight from SQLAlchemy rows:

    vehicle = db.get(Vehicle, "truck-001")
    return VehicleOut.model_validate(vehicle)
"""

from .common import Position
from .vehicles import VehicleOut, VehicleCreate, VehicleUpdate, VehicleMoveRequest
from .pois import PoiOut, PoiCreate, PoiUpdate
from .materials import MaterialOut, MaterialCreate, MaterialProperties
from .tasks import (
    TaskOut,
    TaskStepOut,
    TaskCreate,
    TaskUpdate,
    TaskApprovalRequest,
    ManualStepIn,
    DecomposeRequest,
    DecompositionOut,
    PlannedStepOut,
)
from .chat import ChatMessageOut, ChatMessageCreate, VehicleReplyRequest

__all__ = [
    "Position",
    "VehicleOut",
    "VehicleCreate",
    "VehicleUpdate",
    "VehicleMoveRequest",
    "PoiOut",
    "PoiCreate",
    "PoiUpdate",
    "MaterialOut",
    "MaterialCreate",
    "MaterialProperties",
    "TaskOut",
    "TaskStepOut",
    "TaskCreate",
    "TaskUpdate",
    "TaskApprovalRequest",
    "ManualStepIn",
    "DecomposeRequest",
    "DecompositionOut",
    "PlannedStepOut",
    "ChatMessageOut",
    "ChatMessageCreate",
    "VehicleReplyRequest",
]
