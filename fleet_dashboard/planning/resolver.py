"""
Entity Resolver.

Pulls the quantity, material names and POI references out of an instruction
and resolves the vehicle's capacity. All matching is case-insensitive
substring containment against a catalog snapshot passed in by the caller.
Unknown materials or places are tolerated: they simply do not match, and the
plan builder falls back to defaults.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..config import DEFAULT_QUANTITY_TONS, DEFAULT_VEHICLE_CAPACITY
from .constants import QUANTITY_PATTERN
from .types import CatalogSnapshot, MaterialRecord, PoiRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedEntities:
    quantity: int
    quantity_stated: bool
    materials: Tuple[str, ...]
    pois: Tuple[PoiRecord, ...]
    vehicle_capacity: float
    vehicle_id: Optional[str]


def extract_quantity(instruction: str) -> Optional[int]:
    """
    Return the first integer tonnage in the instruction, or None.

    Examples:
        "Load 150 tons of Material A" -> 150
        "move 1 ton" -> 1
        "clear zone A" -> None
    """
    match = QUANTITY_PATTERN.search(instruction or "")
    if not match:
        return None
    return int(match.group(1))


def find_mentioned_materials(instruction: str, materials: Iterable[MaterialRecord]) -> List[str]:
    """Material names found in the instruction, in catalog order."""
    text = (instruction or "").lower()
    return [m.name for m in materials if m.name.lower() in text]


def find_mentioned_pois(instruction: str, pois: Iterable[PoiRecord]) -> List[PoiRecord]:
    """POIs whose name, type or id appears in the instruction, in catalog order."""
    text = (instruction or "").lower()
    return [
        poi for poi in pois
        if poi.name.lower() in text
        or poi.type.lower() in text
        or poi.id.lower() in text
    ]


def resolve_vehicle_capacity(vehicle_id: Optional[str], catalog: CatalogSnapshot) -> float:
    vehicle = catalog.find_vehicle(vehicle_id)
    if vehicle is None:
        if vehicle_id:
            logger.debug("Vehicle %s not in catalog, assuming capacity %s", vehicle_id, DEFAULT_VEHICLE_CAPACITY)
        return DEFAULT_VEHICLE_CAPACITY
    return vehicle.capacity


def resolve_entities(
    instruction: str,
    vehicle_id: Optional[str],
    catalog: CatalogSnapshot,
) -> ResolvedEntities:
    quantity = extract_quantity(instruction)
    entities = ResolvedEntities(
        quantity=quantity if quantity is not None else DEFAULT_QUANTITY_TONS,
        quantity_stated=quantity is not None,
        materials=tuple(find_mentioned_materials(instruction, catalog.materials)),
        pois=tuple(find_mentioned_pois(instruction, catalog.pois)),
        vehicle_capacity=resolve_vehicle_capacity(vehicle_id, catalog),
        vehicle_id=vehicle_id,
    )
    logger.debug(
        "Resolved instruction: quantity=%s materials=%s pois=%s capacity=%s",
        entities.quantity,
        list(entities.materials),
        [p.id for p in entities.pois],
        entities.vehicle_capacity,
    )
    return entities
