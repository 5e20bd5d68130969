"""
Task Decomposer.

Entry point of the planning package: classify the instruction, resolve the
entities it mentions against a catalog snapshot, and build the step plan.

    plan = decompose("Load 150 tons of Material A and transport it to the crusher",
                     vehicle_id="truck-001", catalog=snapshot)
    plan.estimated_duration  # 94 with a 100-ton truck

The function is pure: the caller loads the snapshot (see
services/catalog.py) and persists the result.
"""

import logging
from typing import Optional

from .builder import build_plan
from .classifier import Strategy, classify_instruction
from .resolver import resolve_entities
from .types import EMPTY_CATALOG, CatalogSnapshot, Decomposition

logger = logging.getLogger(__name__)


def decompose(
    instruction: str,
    vehicle_id: Optional[str] = None,
    catalog: CatalogSnapshot = EMPTY_CATALOG,
) -> Decomposition:
    strategy = classify_instruction(instruction)
    logger.debug("Instruction classified as %s", strategy.value)

    if strategy == Strategy.GENERIC:
        # Generic plans carry the raw instruction; nothing to resolve
        return build_plan(
            strategy,
            quantity=0,
            materials=(),
            pois=(),
            vehicle_capacity=0,
            vehicle_id=vehicle_id,
            instruction=instruction,
            catalog=catalog,
        )

    entities = resolve_entities(instruction, vehicle_id, catalog)
    return build_plan(
        strategy,
        quantity=entities.quantity,
        materials=entities.materials,
        pois=entities.pois,
        vehicle_capacity=entities.vehicle_capacity,
        vehicle_id=vehicle_id,
        instruction=instruction,
        catalog=catalog,
        quantity_stated=entities.quantity_stated,
    )
