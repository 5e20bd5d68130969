"""
Material Schemas for the Fleet Dashboard.

Materials are descriptive catalog entries. The planner only uses their
names; the map uses the color, and the operator panel shows safety data.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import HazardLevel, MaterialType, ToxicityLevel


class MaterialProperties(BaseModel):
    hardness: Optional[float] = None
    toxicity: ToxicityLevel = "none"
    flammability: HazardLevel = "none"
    corrosiveness: HazardLevel = "none"
    radioactivity: bool = False


class MaterialOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    density: float
    color: str
    description: Optional[str] = None
    properties: Dict[str, Any] = {}
    economic_data: Dict[str, Any] = {}
    compliance: Dict[str, Any] = {}
    safety_level: str
    created_at: Optional[datetime] = None


class MaterialCreate(BaseModel):
    """
    Request model for adding a material to the catalog.

    Example:
        {
            "name": "Material C",
            "type": "ore",
            "density": 2.9,
            "color": "#B87333",
            "properties": {"toxicity": "medium"}
        }
    """
    name: str = Field(..., min_length=1)
    type: MaterialType
    density: float = Field(..., ge=0)
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    description: Optional[str] = None
    properties: MaterialProperties = MaterialProperties()
    economic_data: Dict[str, Any] = {}
    compliance: Dict[str, Any] = {}
