"""
Configuration Module for the Fleet Dashboard
============================================

This module centralizes the configuration settings, environment variables, and
constants used throughout the fleet dashboard backend. Values are parsed once
at import time; `main.py` calls `load_dotenv()` before anything imports this
module, so a local `.env` file is honoured.

Configuration Categories:
-------------------------
- **Database**: SQLAlchemy connection URL for the site store.

- **Rate Limiting**: Per-client request throttling via slowapi.

- **CORS Settings**: Origins allowed to reach the API and the WebSocket hub.
  Defaults to the Vite dev server used by the map frontend.

- **Planning Defaults**: Fallbacks used by the task decomposer when an
  instruction or vehicle does not provide a value.

- **Chat**: Message length and history page size for vehicle chat.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./fleet_dashboard.db")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- RATE_LIMIT_DEFAULT: Default limit per client (default: "100 per 15 minutes")
- CORS_ORIGINS: Comma-separated allowed origins (default: "http://localhost:5173")
- DEFAULT_VEHICLE_CAPACITY: Tons assumed for an unknown vehicle (default: 100)
- DEFAULT_QUANTITY_TONS: Tons assumed when an instruction names none (default: 100)
- CHAT_HISTORY_LIMIT: Messages returned per chat history page (default: 50)
- MAX_MESSAGE_LENGTH: Max chat message length (default: 2000)
- HOST / PORT: Bind address for run_server.py (default: 0.0.0.0 / 3001)

Usage:
------
    from fleet_dashboard.config import (
        DATABASE_URL,
        DEFAULT_VEHICLE_CAPACITY,
        MAX_MESSAGE_LENGTH,
    )
"""

import os
from typing import List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./fleet_dashboard.db")


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Format: "X per Y" where Y is second, minute, hour, or day
# Examples: "20 per minute", "100 per 15 minutes"

RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100 per 15 minutes")


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "http://localhost:5173")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Planning Defaults
# =============================================================================
# Used by the decomposer when the instruction or the fleet state leaves a
# value unspecified. The decomposer never rejects an instruction for missing
# data; it falls back to these.

DEFAULT_VEHICLE_CAPACITY: int = int(os.getenv("DEFAULT_VEHICLE_CAPACITY", "100"))
DEFAULT_QUANTITY_TONS: int = int(os.getenv("DEFAULT_QUANTITY_TONS", "100"))


# =============================================================================
# Chat Configuration
# =============================================================================

CHAT_HISTORY_LIMIT: int = int(os.getenv("CHAT_HISTORY_LIMIT", "50"))
MAX_MESSAGE_LENGTH: int = int(os.getenv("MAX_MESSAGE_LENGTH", "2000"))


# =============================================================================
# Server
# =============================================================================

HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3001"))
