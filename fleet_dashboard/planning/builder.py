"""
Plan Builder.

Turns a classified instruction and its resolved entities into an ordered
list of steps with duration estimates.

Trip Splitting:
---------------
Load-and-transport and clear-zone jobs move a tonnage with one vehicle.
When the tonnage exceeds the vehicle's capacity the job is split into
ceil(quantity / capacity) trips; every trip but the last carries a full
load and the last carries the remainder. Each trip is four steps:

    move -> load -> transport -> unload

Fill-crusher jobs emit a collect/deliver pair per material and split the
quantity evenly across materials. They are not capacity-split.

Generic jobs are always the same three bookkeeping steps.

Locations:
----------
Sources and destinations come from POIs mentioned in the instruction,
then from the wider catalog. When neither yields a location the step gets
a fixed fallback coordinate; a plan is never refused for missing data.
"""

import logging
import math
from typing import List, Optional, Sequence

from .classifier import Strategy
from .constants import (
    CLEAR_ZONE_DURATIONS,
    DEFAULT_CLEAR_ZONE_NAME,
    DEFAULT_MATERIAL,
    FALLBACK_CLEAR_SOURCE_LABEL,
    FALLBACK_CRUSHER,
    FALLBACK_DESTINATION_LABEL,
    FALLBACK_LOADING_ZONE,
    FALLBACK_SOURCE_LABEL,
    FALLBACK_TARGET_LABEL,
    FILL_CRUSHER_COLLECT_DURATION,
    FILL_CRUSHER_DELIVER_DURATION,
    GENERIC_STEPS,
    LOAD_AND_TRANSPORT_DURATIONS,
    POI_TYPE_CRUSHER,
    POI_TYPE_STORAGE_ZONE,
    PRIORITY_HIGH,
    PRIORITY_MEDIUM,
)
from .types import (
    EMPTY_CATALOG,
    CatalogSnapshot,
    Decomposition,
    PlannedStep,
    PoiRecord,
    Position,
    StepParameters,
)

logger = logging.getLogger(__name__)


def normalize_tons(value: float):
    """Return whole tonnages as int so labels read "50 tons", not "50.0 tons"."""
    if float(value).is_integer():
        return int(value)
    return round(float(value), 2)


def split_trips(quantity: float, capacity: float) -> List[float]:
    """
    Split a tonnage into per-trip loads bounded by vehicle capacity.

    A quantity within capacity, or a vehicle with no usable capacity, is a
    single trip carrying everything.

    Examples:
        split_trips(150, 100) -> [100, 50]
        split_trips(300, 100) -> [100, 100, 100]
        split_trips(80, 100) -> [80]
        split_trips(0, 100) -> [0]
    """
    if capacity <= 0 or quantity <= capacity:
        return [normalize_tons(quantity)]

    trip_count = math.ceil(quantity / capacity)
    loads = [normalize_tons(capacity)] * (trip_count - 1)
    loads.append(normalize_tons(quantity - (trip_count - 1) * capacity))
    return loads


def build_summary(step_count: int, estimated_duration: int) -> str:
    return (
        f"Task decomposed into {step_count} steps with estimated duration "
        f"of {estimated_duration} minutes"
    )


class PlanBuilder:
    """Accumulates steps for one instruction. Use build_plan() rather than this directly."""

    def __init__(
        self,
        vehicle_id: Optional[str],
        instruction: str = "",
        catalog: CatalogSnapshot = EMPTY_CATALOG,
    ):
        self.vehicle_id = vehicle_id
        self.instruction = instruction or ""
        self.text = self.instruction.lower()
        self.catalog = catalog
        self.steps: List[PlannedStep] = []

    def add_step(self, action: str, description: str, duration: int, **params) -> PlannedStep:
        step = PlannedStep(
            step_number=len(self.steps) + 1,
            action=action,
            description=description,
            estimated_duration=duration,
            parameters=StepParameters(vehicle_id=self.vehicle_id, **params),
        )
        self.steps.append(step)
        return step

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def load_and_transport(
        self,
        quantity: float,
        materials: Sequence[str],
        pois: Sequence[PoiRecord],
        vehicle_capacity: float,
    ) -> None:
        material = materials[0] if materials else DEFAULT_MATERIAL

        source = next((p for p in pois if material in p.materials), None)
        if source is None:
            source = self.catalog.find_poi(lambda p: material in p.materials)

        destination = next(
            (p for p in pois if p.type == POI_TYPE_CRUSHER and p.name.lower() in self.text),
            None,
        )
        if destination is None:
            destination = self.catalog.find_poi(lambda p: p.type == POI_TYPE_CRUSHER)

        source_name = source.name if source else FALLBACK_SOURCE_LABEL
        source_position = source.position if source else FALLBACK_LOADING_ZONE
        destination_name = destination.name if destination else FALLBACK_DESTINATION_LABEL
        destination_position = destination.position if destination else FALLBACK_CRUSHER
        source_id = source.id if source else None
        destination_id = destination.id if destination else None

        loads = split_trips(quantity, vehicle_capacity)
        multi_trip = len(loads) > 1
        total = normalize_tons(quantity)
        durations = LOAD_AND_TRANSPORT_DURATIONS

        for trip, amount in enumerate(loads, start=1):
            self.add_step(
                f"Move to {source_name}",
                f"Navigate to source location for trip {trip}" if multi_trip
                else "Navigate to source location",
                durations.move,
                destination=source_position,
            )
            self.add_step(
                f"Load {amount} tons of {material}",
                f"Load materials onto vehicle ({amount}/{total} tons)" if multi_trip
                else "Load materials onto vehicle",
                durations.load,
                material=material,
                amount=amount,
                source_id=source_id,
            )
            self.add_step(
                f"Transport to {destination_name}",
                "Move loaded vehicle to destination",
                durations.transport,
                destination=destination_position,
                destination_id=destination_id,
            )
            self.add_step(
                f"Unload {amount} tons",
                "Unload materials at destination",
                durations.unload,
                amount=amount,
                destination_id=destination_id,
            )

    def clear_zone(
        self,
        quantity: float,
        quantity_stated: bool,
        pois: Sequence[PoiRecord],
        vehicle_capacity: float,
    ) -> None:
        source = next((p for p in pois if p.type == POI_TYPE_STORAGE_ZONE), None)
        if source is None:
            source = self.catalog.find_poi(lambda p: DEFAULT_CLEAR_ZONE_NAME in p.name.lower())

        targets = [
            p for p in pois
            if p.type == POI_TYPE_STORAGE_ZONE and (source is None or p.id != source.id)
        ]

        # An explicit tonnage wins; otherwise clear whatever the zone holds.
        # An empty zone still gets one 0-ton trip so the task has steps to run.
        if quantity_stated or source is None:
            to_move = quantity
        else:
            to_move = source.current_amount

        source_name = source.name if source else FALLBACK_CLEAR_SOURCE_LABEL
        source_position = source.position if source else FALLBACK_LOADING_ZONE
        source_id = source.id if source else None
        durations = CLEAR_ZONE_DURATIONS

        for trip, amount in enumerate(split_trips(to_move, vehicle_capacity), start=1):
            target = targets[trip % len(targets)] if targets else None
            target_name = target.name if target else FALLBACK_TARGET_LABEL

            self.add_step(
                f"Move to {source_name}",
                f"Navigate to source zone for clearing operation (trip {trip})",
                durations.move,
                destination=source_position,
                source_id=source_id,
            )
            self.add_step(
                f"Load {amount} tons from {source_name}",
                "Load materials for relocation",
                durations.load,
                amount=amount,
                source_id=source_id,
            )
            self.add_step(
                f"Transport to {target_name}",
                "Move materials to destination zone",
                durations.transport,
                destination=target.position if target else FALLBACK_LOADING_ZONE,
                destination_id=target.id if target else None,
            )
            self.add_step(
                f"Unload at {target_name}",
                "Unload materials at destination",
                durations.unload,
                amount=amount,
                destination_id=target.id if target else None,
            )

    def fill_crusher(
        self,
        quantity: float,
        materials: Sequence[str],
        pois: Sequence[PoiRecord],
    ) -> None:
        crusher = next((p for p in pois if p.type == POI_TYPE_CRUSHER), None)
        if crusher is None:
            crusher = self.catalog.find_poi(lambda p: p.type == POI_TYPE_CRUSHER)

        materials = list(materials) or [DEFAULT_MATERIAL]
        # Even split per material; not capacity-split (see DESIGN.md)
        amount = normalize_tons(quantity / len(materials))

        for material in materials:
            source = self.catalog.find_poi(lambda p, m=material: m in p.materials)
            self.add_step(
                f"Collect {material}",
                f"Move to source and load {amount} tons of {material}",
                FILL_CRUSHER_COLLECT_DURATION,
                material=material,
                amount=amount,
                source_id=source.id if source else None,
                destination=source.position if source else FALLBACK_LOADING_ZONE,
            )
            self.add_step(
                f"Deliver {material} to crusher",
                f"Transport and unload {material} at crusher facility",
                FILL_CRUSHER_DELIVER_DURATION,
                material=material,
                amount=amount,
                destination_id=crusher.id if crusher else None,
                destination=crusher.position if crusher else FALLBACK_CRUSHER,
            )

    def generic(self) -> None:
        for action, description, duration in GENERIC_STEPS:
            self.add_step(action, description, duration, instruction=self.instruction)

    def result(self, strategy: Strategy, priority: str) -> Decomposition:
        estimated_duration = sum(step.estimated_duration for step in self.steps)
        return Decomposition(
            strategy=strategy.value,
            steps=self.steps,
            estimated_duration=estimated_duration,
            priority=priority,
            summary=build_summary(len(self.steps), estimated_duration),
        )


def build_plan(
    strategy: Strategy,
    quantity: float,
    materials: Sequence[str],
    pois: Sequence[PoiRecord],
    vehicle_capacity: float,
    vehicle_id: Optional[str],
    instruction: str = "",
    catalog: CatalogSnapshot = EMPTY_CATALOG,
    quantity_stated: bool = True,
) -> Decomposition:
    """
    Build the step plan for a classified instruction.

    Args:
        strategy: Strategy picked by the classifier
        quantity: Requested tonnage
        materials: Material names mentioned in the instruction
        pois: POIs mentioned in the instruction
        vehicle_capacity: Capacity of the assigned vehicle, in tons
        vehicle_id: Vehicle the plan is for (may be None)
        instruction: Raw instruction text
        catalog: Snapshot used to resolve locations the instruction omits
        quantity_stated: Whether the tonnage came from the instruction
            rather than the default. Clear-zone jobs without an explicit
            tonnage move the zone's current inventory.

    Returns:
        Decomposition with steps, total duration, priority and summary
    """
    builder = PlanBuilder(vehicle_id, instruction, catalog)

    if strategy == Strategy.LOAD_AND_TRANSPORT:
        builder.load_and_transport(quantity, materials, pois, vehicle_capacity)
        priority = PRIORITY_HIGH
    elif strategy == Strategy.CLEAR_ZONE:
        builder.clear_zone(quantity, quantity_stated, pois, vehicle_capacity)
        priority = PRIORITY_HIGH
    elif strategy == Strategy.FILL_CRUSHER:
        builder.fill_crusher(quantity, materials, pois)
        priority = PRIORITY_MEDIUM
    else:
        builder.generic()
        priority = PRIORITY_MEDIUM

    plan = builder.result(strategy, priority)
    logger.debug(
        "Built %s plan: %d steps, %d minutes",
        strategy.value,
        len(plan.steps),
        plan.estimated_duration,
    )
    return plan
