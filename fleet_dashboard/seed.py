"""
Demo site data: four vehicles, five POIs, two materials and a few chat
messages. No tasks are seeded; they are created through the API.

    python -m fleet_dashboard.seed          # seed an empty database
    python -m fleet_dashboard.seed --reset  # wipe and reseed
"""

import argparse
import logging
from datetime import timedelta
from typing import Dict

from sqlalchemy.orm import Session

from .db import SessionLocal, init_db
from .models import ChatMessage, Material, PointOfInterest, Task, TaskStep, Vehicle, utcnow


logger = logging.getLogger(__name__)


def _days_from_now(days: int) -> str:
    return (utcnow() + timedelta(days=days)).isoformat()


def build_materials():
    return [
        Material(
            name="Material A",
            type="ore",
            density=2.5,
            color="#8B4513",
            description="Primary ore material",
            properties={
                "hardness": 7.5,
                "toxicity": "low",
                "flammability": "none",
                "corrosiveness": "none",
                "radioactivity": False,
            },
            economic_data={"price_per_ton": 850, "currency": "USD", "market_demand": "high"},
            compliance={
                "regulations": ["MSHA-001", "EPA-MINING-2023"],
                "certifications": ["ISO-14001"],
                "environmental_impact": "low",
            },
        ),
        Material(
            name="Material B",
            type="mineral",
            density=1.8,
            color="#696969",
            description="Secondary processing material",
            properties={
                "hardness": 5.2,
                "toxicity": "none",
                "flammability": "none",
                "corrosiveness": "low",
                "radioactivity": False,
            },
            economic_data={"price_per_ton": 420, "currency": "USD", "market_demand": "medium"},
            compliance={"environmental_impact": "minimal"},
        ),
    ]


def build_vehicles():
    return [
        Vehicle(
            id="truck-001", name="Mining Truck Alpha", type="haul_truck",
            lat=40.7589, lng=-111.8883, status="idle",
            capacity=100, current_load=0, battery_level=85, route=[],
            extra_metadata={
                "manufacturer": "Caterpillar",
                "model": "CAT 797F",
                "year": 2022,
                "serial_number": "CAT797F-001",
                "last_maintenance": _days_from_now(-30),
                "next_maintenance": _days_from_now(60),
            },
        ),
        Vehicle(
            id="truck-002", name="Mining Truck Beta", type="haul_truck",
            lat=40.7609, lng=-111.8901, status="moving",
            capacity=100, current_load=75, battery_level=62,
            destination={"lat": 40.7629, "lng": -111.8941},
            route=[
                {"lat": 40.7609, "lng": -111.8901},
                {"lat": 40.7619, "lng": -111.8921},
                {"lat": 40.7629, "lng": -111.8941},
            ],
            extra_metadata={
                "manufacturer": "Komatsu",
                "model": "HD605-8",
                "year": 2021,
                "serial_number": "KOM605-002",
            },
        ),
        Vehicle(
            id="excavator-001", name="Excavator Prime", type="excavator",
            lat=40.7569, lng=-111.8863, status="working",
            capacity=50, current_load=0, battery_level=91, route=[],
            extra_metadata={
                "manufacturer": "Liebherr",
                "model": "R 9800",
                "year": 2023,
                "serial_number": "LIE9800-001",
            },
        ),
        Vehicle(
            id="loader-001", name="Loader Unit 1", type="loader",
            lat=40.7549, lng=-111.8843, status="idle",
            capacity=75, current_load=0, battery_level=78, route=[],
            extra_metadata={
                "manufacturer": "Volvo",
                "model": "L350H",
                "year": 2022,
                "serial_number": "VOL350-001",
            },
        ),
    ]


def build_pois():
    # Creation order is catalog order for the planner: zones first
    now = utcnow()
    pois = [
        PointOfInterest(
            id="zone-a", name="Zone A - Material A Storage", type="storage_zone",
            lat=40.7549, lng=-111.8823, materials=["Material A"],
            capacity=1000, current_amount=750,
            description="Primary storage area for Material A",
            extra_metadata={
                "operating_hours": {"start": "06:00", "end": "22:00"},
                "supervisor": "John Smith",
                "equipment": ["Conveyor Belt A-1", "Scale System A-2"],
                "last_inspection": _days_from_now(-7),
                "next_inspection": _days_from_now(23),
            },
        ),
        PointOfInterest(
            id="zone-b", name="Zone B - Material B Storage", type="storage_zone",
            lat=40.7589, lng=-111.8823, materials=["Material B"],
            capacity=800, current_amount=450,
            description="Storage area for Material B",
            extra_metadata={
                "operating_hours": {"start": "06:00", "end": "22:00"},
                "supervisor": "Jane Doe",
                "equipment": ["Conveyor Belt B-1"],
            },
        ),
        PointOfInterest(
            id="zone-c", name="Zone C - Mixed Storage", type="storage_zone",
            lat=40.7629, lng=-111.8823, materials=["Material A", "Material B"],
            capacity=1200, current_amount=200,
            description="Mixed material storage zone",
            extra_metadata={},
        ),
        PointOfInterest(
            id="crusher-01", name="Primary Crusher", type="crusher",
            lat=40.7629, lng=-111.8941, materials=[],
            capacity=500, current_amount=0,
            description="Main crushing facility",
            extra_metadata={
                "operating_hours": {"start": "00:00", "end": "23:59"},
                "supervisor": "Mike Johnson",
                "equipment": ["Primary Jaw Crusher", "Conveyor System C-1"],
            },
        ),
        PointOfInterest(
            id="loading-dock-01", name="Loading Dock Alpha", type="loading_dock",
            lat=40.7509, lng=-111.8803, materials=[],
            capacity=200, current_amount=0,
            description="Primary loading dock for material pickup",
            extra_metadata={},
        ),
    ]
    for offset, poi in enumerate(pois):
        poi.created_at = now + timedelta(microseconds=offset)
    return pois


def build_chat_messages():
    now = utcnow()
    rows = [
        ("msg-001", "truck-001", "System initialized. Ready for commands.", "system", 300, True),
        ("msg-002", "truck-001", "Battery level optimal. All systems operational.", "vehicle", 240, True),
        ("msg-003", "truck-002", "Currently en route to crusher facility.", "vehicle", 180, False),
        ("msg-004", "excavator-001", "Excavation operations in progress.", "vehicle", 120, False),
        ("msg-005", "loader-001", "Awaiting loading instructions.", "vehicle", 60, False),
    ]
    return [
        ChatMessage(
            id=message_id,
            vehicle_id=vehicle_id,
            message=text,
            sender=sender,
            message_type="status",
            priority="normal",
            timestamp=now - timedelta(seconds=seconds_ago),
            is_read=is_read,
        )
        for message_id, vehicle_id, text, sender, seconds_ago, is_read in rows
    ]


def clear_site(db: Session) -> None:
    """Delete every row the seed owns, tasks included."""
    for model in (TaskStep, Task, ChatMessage, PointOfInterest, Vehicle, Material):
        db.query(model).delete()
    db.commit()
    logger.info("Cleared existing site data")


def seed_site(db: Session, reset: bool = False) -> Dict[str, int]:
    """
    Insert the demo site. Does nothing when vehicles already exist, unless
    `reset` is set.

    Returns:
        Row counts per table after seeding
    """
    if reset:
        clear_site(db)

    existing = db.query(Vehicle).count()
    if existing > 0:
        logger.info("Site already has %d vehicles. Not seeding again.", existing)
    else:
        # Materials first; POIs reference them by name
        db.add_all(build_materials())
        db.add_all(build_vehicles())
        db.add_all(build_pois())
        db.add_all(build_chat_messages())
        db.commit()
        logger.info("Seeded demo site")

    return {
        "vehicles": db.query(Vehicle).count(),
        "pois": db.query(PointOfInterest).count(),
        "materials": db.query(Material).count(),
        "chat_messages": db.query(ChatMessage).count(),
        "tasks": db.query(Task).count(),
    }


def main():
    parser = argparse.ArgumentParser(description="Seed the fleet dashboard database with demo data")
    parser.add_argument("--reset", action="store_true", help="Delete existing data before seeding")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    init_db()

    db = SessionLocal()
    try:
        counts = seed_site(db, reset=args.reset)
    finally:
        db.close()

    for table, count in counts.items():
        print(f"  {table:<14} {count}")


if __name__ == "__main__":
    main()
