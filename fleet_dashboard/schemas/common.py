"""
Shared schema types: positions and the enumerations used across resources.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


VehicleType = Literal["haul_truck", "excavator", "loader", "drill", "bulldozer"]
VehicleStatus = Literal["idle", "moving", "working", "maintenance", "offline"]

PoiType = Literal[
    "storage_zone",
    "crusher",
    "loading_dock",
    "workshop",
    "office",
    "parking",
    "fuel_station",
]
PoiStatus = Literal["operational", "maintenance", "offline", "full", "empty"]

MaterialType = Literal["ore", "mineral", "waste", "processed", "fuel", "equipment", "chemical"]
HazardLevel = Literal["none", "low", "medium", "high"]
ToxicityLevel = Literal["none", "low", "medium", "high", "extreme"]

TaskStatus = Literal[
    "pending_approval",
    "approved",
    "rejected",
    "in_progress",
    "completed",
    "failed",
    "cancelled",
]
TaskPriority = Literal["low", "medium", "high", "urgent"]
StepStatus = Literal["pending", "in_progress", "completed", "failed", "skipped"]

ChatSender = Literal["user", "vehicle", "system", "operator"]
ChatMessageType = Literal["text", "command", "status", "alert", "notification"]
ChatPriority = Literal["low", "normal", "high", "urgent"]


class Position(BaseModel):
    """A map coordinate."""
    model_config = ConfigDict(from_attributes=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
