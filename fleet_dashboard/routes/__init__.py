"""
Routes Package for the Fleet Dashboard
======================================

All API route definitions, one APIRouter per domain.

Modules:
--------
- tasks.py: Instruction decomposition and the task approval/execution flow
- vehicles.py: Fleet listing, updates and simulated moves
- pois.py: Storage zones, crushers and other site locations
- materials.py: Material catalog
- chat.py: Per-vehicle message threads
- events.py: WebSocket endpoint for live notifications

Router Registration:
--------------------
main.py mounts every HTTP router under two prefixes:
1. /api/v1/* - Versioned API
2. /api/* - Unversioned paths used by the dashboard

The WebSocket endpoint is mounted once, at /ws.

Error Handling:
---------------
Routes translate service exceptions (fleet_dashboard.errors) into
HTTPException with the exception's status code:
- 400: Validation failure (e.g. load over capacity)
- 404: Unknown id
- 409: Illegal transition or concurrent update
- 422: Malformed request body (FastAPI)
- 429: Too many requests (rate limited)
- 500: Store failure
"""

from .chat import chat_router
from .events import events_router
from .materials import materials_router
from .pois import pois_router
from .tasks import tasks_router
from .vehicles import vehicles_router

__all__ = [
    "chat_router",
    "events_router",
    "materials_router",
    "pois_router",
    "tasks_router",
    "vehicles_router",
]
