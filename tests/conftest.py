import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import fleet_dashboard.db as db
import fleet_dashboard.main as main_mod
from fleet_dashboard.main import app
from fleet_dashboard.models import Base
from fleet_dashboard.planning import CatalogSnapshot
from fleet_dashboard.seed import build_materials, build_pois, build_vehicles, seed_site
from fleet_dashboard.services.catalog import material_to_record, poi_to_record, vehicle_to_record
from fleet_dashboard.services.events import get_publisher


class RecordingPublisher:
    """Stands in for the WebSocket hub; keeps every published event."""

    def __init__(self):
        self.events = []

    async def publish(self, event, payload, room=None):
        self.events.append((event, payload, room))

    def names(self):
        return [event for event, _, _ in self.events]


def _memory_engine():
    return create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory():
    """sessionmaker bound to a fresh in-memory database holding the demo site."""
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = factory()
    seed_site(session)
    session.close()

    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def site_catalog():
    """Catalog snapshot of the demo site, built without a database."""
    return CatalogSnapshot(
        vehicles=tuple(vehicle_to_record(v) for v in build_vehicles()),
        pois=tuple(poi_to_record(p) for p in build_pois()),
        materials=tuple(material_to_record(m) for m in build_materials()),
    )


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def client(session_factory, publisher):
    """Shared FastAPI TestClient using an in-memory SQLite DB.

    Uses StaticPool so all connections share the same in-memory database.
    Events are captured by the `publisher` fixture instead of the hub.
    """
    original_engine, original_session_local = db.engine, db.SessionLocal
    db.SessionLocal = session_factory
    db.engine = session_factory.kw["bind"]

    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    app.dependency_overrides[get_publisher] = lambda: publisher

    # Default limits would otherwise accumulate across the whole session
    original_limiter_enabled = main_mod.limiter.enabled
    main_mod.limiter.enabled = False

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    main_mod.limiter.enabled = original_limiter_enabled
    db.engine, db.SessionLocal = original_engine, original_session_local
