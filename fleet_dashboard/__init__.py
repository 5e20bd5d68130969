"""
Fleet Dashboard Backend
=======================

REST and WebSocket backend for a mining-site fleet dashboard: vehicles,
points of interest, materials, per-vehicle chat, and a task engine that
turns operator instructions ("Load 150 tons of Material A and transport
it to the crusher") into step-by-step plans awaiting approval.

Package Layout:
---------------
- **planning/**: Pure instruction decomposition (classifier, entity
  resolver, plan builder); no database access
- **services/**: Business logic over SQLAlchemy sessions
- **routes/**: FastAPI routers
- **schemas/**: Pydantic request/response models
- **models.py**: SQLAlchemy ORM models
- **db.py**: Engine, session factory and the get_db dependency
- **config.py**: Environment-driven settings
- **errors.py**: Domain exceptions and their HTTP status codes
- **seed.py**: Demo site data

Entry point: `fleet_dashboard.main:app`.
"""
