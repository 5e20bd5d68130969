"""
Tests for trip splitting and plan building.
"""

import math
from dataclasses import replace

import pytest

from fleet_dashboard.planning import Strategy, build_plan, decompose, split_trips
from fleet_dashboard.planning.builder import build_summary, normalize_tons
from fleet_dashboard.planning.types import EMPTY_CATALOG


# =============================================================================
# Trip Splitting
# =============================================================================

class TestSplitTrips:

    @pytest.mark.parametrize("quantity,capacity,expected", [
        (150, 100, [100, 50]),
        (300, 100, [100, 100, 100]),
        (80, 100, [80]),
        (100, 100, [100]),
        (250, 75, [75, 75, 75, 25]),
    ])
    def test_examples(self, quantity, capacity, expected):
        assert split_trips(quantity, capacity) == expected

    @pytest.mark.parametrize("quantity,capacity", [
        (1, 100), (99, 100), (101, 100), (450, 100), (750, 100), (120, 50), (1000, 75),
    ])
    def test_trip_properties(self, quantity, capacity):
        """Loads sum to the quantity, never exceed capacity, and use the fewest trips."""
        loads = split_trips(quantity, capacity)
        assert sum(loads) == quantity
        assert all(0 < load <= capacity for load in loads)
        assert len(loads) == max(1, math.ceil(quantity / capacity))

    def test_zero_capacity_is_one_trip(self):
        assert split_trips(150, 0) == [150]

    def test_whole_numbers_render_without_decimal(self):
        assert normalize_tons(50.0) == 50
        assert isinstance(normalize_tons(50.0), int)
        assert normalize_tons(33.333333) == 33.33


# =============================================================================
# Load and Transport
# =============================================================================

class TestLoadAndTransport:

    INSTRUCTION = "Load 150 tons of Material A and transport it to the crusher"

    def test_two_trips(self, site_catalog):
        plan = decompose(self.INSTRUCTION, vehicle_id="truck-001", catalog=site_catalog)

        assert plan.strategy == "load_and_transport"
        assert len(plan.steps) == 8
        assert plan.estimated_duration == 94
        assert plan.priority == "high"
        assert plan.summary == "Task decomposed into 8 steps with estimated duration of 94 minutes"

    def test_step_labels(self, site_catalog):
        plan = decompose(self.INSTRUCTION, vehicle_id="truck-001", catalog=site_catalog)
        actions = [s.action for s in plan.steps]

        assert actions[0] == "Move to Zone A - Material A Storage"
        assert actions[1] == "Load 100 tons of Material A"
        assert actions[2] == "Transport to Primary Crusher"
        assert actions[3] == "Unload 100 tons"
        assert actions[5] == "Load 50 tons of Material A"
        assert actions[7] == "Unload 50 tons"
        assert plan.steps[1].description == "Load materials onto vehicle (100/150 tons)"
        assert plan.steps[4].description == "Navigate to source location for trip 2"

    def test_step_numbers_and_status(self, site_catalog):
        plan = decompose(self.INSTRUCTION, vehicle_id="truck-001", catalog=site_catalog)
        assert [s.step_number for s in plan.steps] == list(range(1, 9))
        assert all(s.status == "pending" for s in plan.steps)
        assert len({s.id for s in plan.steps}) == 8

    def test_step_parameters(self, site_catalog):
        plan = decompose(self.INSTRUCTION, vehicle_id="truck-001", catalog=site_catalog)

        move, load, transport, unload = (s.parameters.to_dict() for s in plan.steps[:4])
        assert move == {"vehicle_id": "truck-001", "destination": {"lat": 40.7549, "lng": -111.8823}}
        assert load == {
            "vehicle_id": "truck-001",
            "material": "Material A",
            "amount": 100,
            "source_id": "zone-a",
        }
        assert transport["destination_id"] == "crusher-01"
        assert transport["destination"] == {"lat": 40.7629, "lng": -111.8941}
        assert unload["amount"] == 100

    def test_single_trip_descriptions(self, site_catalog):
        plan = decompose(
            "Load 80 tons of Material B and transport it to the crusher",
            vehicle_id="truck-001",
            catalog=site_catalog,
        )
        assert len(plan.steps) == 4
        assert plan.steps[0].action == "Move to Zone B - Material B Storage"
        assert plan.steps[0].description == "Navigate to source location"
        assert plan.steps[1].description == "Load materials onto vehicle"

    def test_smaller_vehicle_needs_more_trips(self, site_catalog):
        plan = decompose(
            "Load 120 tons of Material B and transport to crusher",
            vehicle_id="excavator-001",
            catalog=site_catalog,
        )
        assert len(plan.steps) == 12
        assert plan.estimated_duration == 141
        assert [s.parameters.amount for s in plan.steps if s.action.startswith("Unload")] == [50, 50, 20]

    def test_empty_catalog_uses_fallbacks(self):
        plan = decompose("Load 50 tons and transport them", vehicle_id=None, catalog=EMPTY_CATALOG)

        assert len(plan.steps) == 4
        assert plan.steps[0].action == "Move to loading zone"
        assert plan.steps[1].action == "Load 50 tons of Material A"
        assert plan.steps[2].action == "Transport to crusher"
        assert plan.steps[0].parameters.destination.lat == 40.7549
        assert plan.steps[2].parameters.destination.lng == -111.8941
        assert plan.steps[0].parameters.to_dict() == {
            "vehicle_id": None,
            "destination": {"lat": 40.7549, "lng": -111.8823},
        }


# =============================================================================
# Clear Zone
# =============================================================================

class TestClearZone:

    def test_stated_quantity_between_zones(self, site_catalog):
        plan = decompose(
            "Clear 120 tons from zone-a to zone-b",
            vehicle_id="truck-001",
            catalog=site_catalog,
        )
        assert plan.strategy == "clear_zone"
        assert plan.priority == "high"
        assert len(plan.steps) == 8
        assert plan.estimated_duration == 76
        assert plan.steps[0].action == "Move to Zone A - Material A Storage"
        assert plan.steps[1].action == "Load 100 tons from Zone A - Material A Storage"
        assert plan.steps[2].action == "Transport to Zone B - Material B Storage"
        assert plan.steps[3].action == "Unload at Zone B - Material B Storage"
        assert plan.steps[5].action == "Load 20 tons from Zone A - Material A Storage"
        assert plan.steps[0].description == "Navigate to source zone for clearing operation (trip 1)"

    def test_without_quantity_moves_current_inventory(self, site_catalog):
        """zone-b holds 450 tons: five trips with a 100-ton truck."""
        plan = decompose("Clear zone-b", vehicle_id="truck-001", catalog=site_catalog)

        assert len(plan.steps) == 20
        assert plan.estimated_duration == 190
        loads = [s.parameters.amount for s in plan.steps if s.action.startswith("Load")]
        assert loads == [100, 100, 100, 100, 50]
        assert plan.steps[2].action == "Transport to target zone"

    def test_no_zone_mentioned_defaults_to_zone_a(self, site_catalog):
        plan = decompose("Clear the zone", vehicle_id="truck-001", catalog=site_catalog)
        assert plan.steps[0].action == "Move to Zone A - Material A Storage"
        assert plan.steps[0].parameters.source_id == "zone-a"
        # zone-a holds 750 tons
        assert len(plan.steps) == 32

    def test_empty_zone_is_one_zero_ton_trip(self, site_catalog):
        """An empty source zone still yields a runnable plan: one trip of 0 tons."""
        pois = tuple(
            replace(p, current_amount=0.0) if p.id == "zone-a" else p
            for p in site_catalog.pois
        )
        catalog = replace(site_catalog, pois=pois)

        plan = decompose("Clear zone-a", vehicle_id="truck-001", catalog=catalog)

        assert plan.strategy == "clear_zone"
        assert len(plan.steps) == 4
        assert plan.estimated_duration == 38
        assert plan.steps[1].action == "Load 0 tons from Zone A - Material A Storage"
        assert plan.steps[1].parameters.amount == 0
        assert plan.summary == "Task decomposed into 4 steps with estimated duration of 38 minutes"

    def test_empty_catalog(self):
        plan = decompose("Clear zone X", catalog=EMPTY_CATALOG)
        assert len(plan.steps) == 4
        assert plan.steps[0].action == "Move to source zone"
        assert plan.steps[1].action == "Load 100 tons from source zone"


# =============================================================================
# Fill Crusher
# =============================================================================

class TestFillCrusher:

    def test_two_materials_split_evenly(self, site_catalog):
        plan = decompose(
            "Fill the crusher with Material A and Material B",
            vehicle_id="truck-001",
            catalog=site_catalog,
        )
        assert plan.strategy == "fill_crusher"
        assert plan.priority == "medium"
        assert [s.action for s in plan.steps] == [
            "Collect Material A",
            "Deliver Material A to crusher",
            "Collect Material B",
            "Deliver Material B to crusher",
        ]
        assert plan.estimated_duration == 76
        assert plan.steps[0].description == "Move to source and load 50 tons of Material A"
        assert plan.steps[0].parameters.source_id == "zone-a"
        assert plan.steps[2].parameters.source_id == "zone-b"
        assert plan.steps[3].parameters.destination_id == "crusher-01"

    def test_no_material_defaults_to_material_a(self, site_catalog):
        plan = decompose("Fill crusher with 60 tons", catalog=site_catalog)
        assert len(plan.steps) == 2
        assert plan.estimated_duration == 38
        assert plan.steps[0].parameters.amount == 60
        assert plan.steps[0].parameters.material == "Material A"

    def test_not_capacity_split(self, site_catalog):
        plan = decompose("Fill crusher with 400 tons of Material B", vehicle_id="truck-001", catalog=site_catalog)
        assert len(plan.steps) == 2
        assert plan.steps[1].parameters.amount == 400


# =============================================================================
# Generic
# =============================================================================

class TestGeneric:

    def test_three_bookkeeping_steps(self, site_catalog):
        plan = decompose("Inspect the haul road", vehicle_id="truck-002", catalog=site_catalog)

        assert plan.strategy == "generic"
        assert [s.action for s in plan.steps] == [
            "Analyze instruction",
            "Execute operation",
            "Report completion",
        ]
        assert [s.estimated_duration for s in plan.steps] == [2, 15, 3]
        assert plan.estimated_duration == 20
        assert plan.priority == "medium"
        assert plan.steps[0].parameters.to_dict() == {
            "vehicle_id": "truck-002",
            "instruction": "Inspect the haul road",
        }


class TestBuildPlan:

    def test_duration_is_sum_of_steps(self, site_catalog):
        plan = build_plan(
            Strategy.LOAD_AND_TRANSPORT,
            quantity=300,
            materials=["Material B"],
            pois=[],
            vehicle_capacity=100,
            vehicle_id="truck-001",
            catalog=site_catalog,
        )
        assert plan.estimated_duration == sum(s.estimated_duration for s in plan.steps)
        assert plan.summary == build_summary(12, 141)
