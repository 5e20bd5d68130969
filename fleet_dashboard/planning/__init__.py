"""
Planning Package for the Fleet Dashboard
========================================

Turns a free-text operator instruction into an ordered, capacity-aware step
plan for one vehicle. Everything here is pure computation over a catalog
snapshot; loading the snapshot and persisting the plan is done by
fleet_dashboard.services.

Modules:
--------
- **classifier.py**: keyword-pair strategy selection
- **resolver.py**: quantity, material and POI extraction; vehicle capacity
- **builder.py**: trip splitting, step emission, duration totals
- **decomposer.py**: the decompose() entry point
- **types.py**: catalog snapshot and plan dataclasses
- **constants.py**: durations, fallback coordinates, patterns

Usage:
------
    from fleet_dashboard.planning import decompose, CatalogSnapshot

    plan = decompose("clear zone A", vehicle_id="truck-001", catalog=snapshot)
"""

from .builder import build_plan, split_trips
from .classifier import Strategy, classify_instruction
from .decomposer import decompose
from .resolver import ResolvedEntities, resolve_entities
from .types import (
    EMPTY_CATALOG,
    CatalogSnapshot,
    Decomposition,
    MaterialRecord,
    PlannedStep,
    PoiRecord,
    Position,
    StepParameters,
    VehicleRecord,
)

__all__ = [
    "build_plan",
    "split_trips",
    "Strategy",
    "classify_instruction",
    "decompose",
    "ResolvedEntities",
    "resolve_entities",
    "EMPTY_CATALOG",
    "CatalogSnapshot",
    "Decomposition",
    "MaterialRecord",
    "PlannedStep",
    "PoiRecord",
    "Position",
    "StepParameters",
    "VehicleRecord",
]
