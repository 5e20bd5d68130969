"""
FastAPI Application for the Fleet Dashboard
===========================================

Builds the ASGI app: middleware, rate limiting, routers and the health
check.

Routers are mounted twice, under /api (paths used by the dashboard) and
/api/v1 (versioned). The WebSocket hub lives at /ws.

Database:
---------
Schema changes are handled by Alembic. Run `alembic upgrade head` before
starting the server against a new database; `run_server.py` and
`python -m fleet_dashboard.seed` also create missing tables on start.

Run:
----
    python run_server.py --reload
    # or
    uvicorn fleet_dashboard.main:app --port 3001
"""

# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Dict

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import CORS_ORIGINS, RATE_LIMIT_DEFAULT, RATE_LIMIT_ENABLED
from .logging_config import setup_logging
from .middleware import RequestIDMiddleware
from .routes import (
    chat_router,
    events_router,
    materials_router,
    pois_router,
    tasks_router,
    vehicles_router,
)

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)


# ---------- Rate Limiting Configuration ----------
# One default limit per client address for every HTTP endpoint.
# In-memory storage; with several workers use storage_uri="redis://...".
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=RATE_LIMIT_ENABLED,
)


app = FastAPI(
    title="Fleet Dashboard API",
    description="Fleet tracking, site catalog and task decomposition for mining operations",
    version="1.0.0",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Tasks", "description": "Instruction decomposition and task approval/execution"},
        {"name": "Vehicles", "description": "Fleet status and simulated moves"},
        {"name": "Points of Interest", "description": "Storage zones, crushers and other site locations"},
        {"name": "Materials", "description": "Material catalog"},
        {"name": "Chat", "description": "Per-vehicle operator chat"},
        {"name": "Events", "description": "WebSocket notifications"},
    ],
)

app.add_middleware(RequestIDMiddleware)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS configuration
# Set CORS_ORIGINS to a comma-separated list, e.g. "https://ops.example.com"
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health", tags=["Health"])
def health() -> Dict[str, str]:
    """Health check endpoint. Returns ok if the service is running."""
    return {"status": "ok"}


# ---------- Routers ----------

def _api_router(prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(tasks_router)
    router.include_router(vehicles_router)
    router.include_router(pois_router)
    router.include_router(materials_router)
    router.include_router(chat_router)
    return router


app.include_router(_api_router("/api"))
app.include_router(_api_router("/api/v1"))
app.include_router(events_router)

logger.info("Fleet dashboard API initialised (rate limiting %s)", "on" if RATE_LIMIT_ENABLED else "off")
