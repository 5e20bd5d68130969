"""
Services Package for the Fleet Dashboard
========================================

Business logic between the API routes and the database. Services take a
SQLAlchemy Session, raise the exceptions in `fleet_dashboard.errors`, and
never build HTTP responses.

Modules:
--------
- **tasks.py**: Task creation, decomposition and the approval/execution
  lifecycle
- **catalog.py**: Catalog snapshots for the planner
- **vehicles.py**: Fleet CRUD and simulated moves
- **pois.py**: Point-of-interest CRUD
- **materials.py**: Material catalog CRUD
- **chat.py**: Vehicle chat history and canned vehicle replies
- **events.py**: WebSocket hub for change notifications
- **helpers.py**: Store error mapping and id generation

Usage:
------
    from fleet_dashboard.services import tasks as task_service

    task = task_service.create_task(db, title="Feed crusher",
                                    description="Load 150 tons of Material A and transport it to the crusher",
                                    vehicle_id="truck-001")
    task = task_service.set_approval(db, task.id, approved=True)
"""
