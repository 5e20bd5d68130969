"""
Planning Constants.

Step durations, fallback coordinates and keyword tables used by the
instruction classifier and the plan builder.
"""

import re
from collections import namedtuple

from .types import Position

# =============================================================================
# Quantity Extraction
# =============================================================================

# First integer followed by "ton"/"tons": "150 tons", "75ton", "20 TONS"
QUANTITY_PATTERN = re.compile(r"(\d+)\s*tons?", re.IGNORECASE)


# =============================================================================
# Step Durations (minutes)
# =============================================================================

TripDurations = namedtuple("TripDurations", ["move", "load", "transport", "unload"])

LOAD_AND_TRANSPORT_DURATIONS = TripDurations(move=10, load=15, transport=12, unload=10)
CLEAR_ZONE_DURATIONS = TripDurations(move=8, load=12, transport=10, unload=8)

FILL_CRUSHER_COLLECT_DURATION = 20
FILL_CRUSHER_DELIVER_DURATION = 18

# (action, description, duration)
GENERIC_STEPS = (
    ("Analyze instruction", "Process and understand the given instruction", 2),
    ("Execute operation", "Perform the requested operation", 15),
    ("Report completion", "Confirm task completion and update status", 3),
)


# =============================================================================
# Fallbacks
# =============================================================================
# A plan is always produced. When a location cannot be resolved from the
# catalog the builder substitutes one of these coordinates.

FALLBACK_LOADING_ZONE = Position(lat=40.7549, lng=-111.8823)
FALLBACK_CRUSHER = Position(lat=40.7629, lng=-111.8941)

DEFAULT_MATERIAL = "Material A"

# Zone cleared when the instruction names no storage zone
DEFAULT_CLEAR_ZONE_NAME = "zone a"

FALLBACK_SOURCE_LABEL = "loading zone"
FALLBACK_DESTINATION_LABEL = "crusher"
FALLBACK_CLEAR_SOURCE_LABEL = "source zone"
FALLBACK_TARGET_LABEL = "target zone"


# =============================================================================
# POI Types referenced by the planner
# =============================================================================

POI_TYPE_STORAGE_ZONE = "storage_zone"
POI_TYPE_CRUSHER = "crusher"


# =============================================================================
# Priorities
# =============================================================================

PRIORITY_HIGH = "high"
PRIORITY_MEDIUM = "medium"
