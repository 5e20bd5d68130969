"""
Event Broadcasting
==================

Fan-out of change notifications to connected dashboard clients over
WebSockets.

Every frame is a JSON object:

    {"event": "task-updated", "data": {...}}

Events:
-------
- task-created, task-updated, task-deleted: broadcast to every client
- vehicle-updated, poi-updated: broadcast to every client
- new-message: sent to the vehicle's room only ("vehicle-<id>")

Clients join and leave vehicle rooms over the socket itself; see
routes/events.py.

Services never talk to sockets directly. Routes depend on
`get_publisher()` and schedule `publish()` as a background task after the
commit, so a slow or dead client cannot fail a request. Tests override the
dependency with a recording publisher.
"""

import logging
from typing import Any, Dict, Optional, Protocol, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketDisconnect


logger = logging.getLogger(__name__)


TASK_CREATED = "task-created"
TASK_UPDATED = "task-updated"
TASK_DELETED = "task-deleted"
VEHICLE_UPDATED = "vehicle-updated"
POI_UPDATED = "poi-updated"
NEW_MESSAGE = "new-message"


def vehicle_room(vehicle_id: str) -> str:
    return f"vehicle-{vehicle_id}"


class EventPublisher(Protocol):
    async def publish(self, event: str, payload: Any, room: Optional[str] = None) -> None:
        ...


class ConnectionHub:
    """Tracks open sockets and the rooms each one has joined."""

    def __init__(self):
        self._connections: Dict[WebSocket, Set[str]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections[websocket] = set()
        logger.debug("Client connected (%d open)", self.connection_count)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.pop(websocket, None)
        logger.debug("Client disconnected (%d open)", self.connection_count)

    def join(self, websocket: WebSocket, room: str) -> None:
        self._connections.setdefault(websocket, set()).add(room)

    def leave(self, websocket: WebSocket, room: str) -> None:
        self._connections.get(websocket, set()).discard(room)

    async def publish(self, event: str, payload: Any, room: Optional[str] = None) -> None:
        """Send an event to every client, or only to members of `room`."""
        frame = {"event": event, "data": jsonable_encoder(payload)}
        targets = [
            ws for ws, rooms in list(self._connections.items())
            if room is None or room in rooms
        ]
        for websocket in targets:
            try:
                await websocket.send_json(frame)
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.info("Dropping client after failed send of %s: %s", event, exc)
                self.disconnect(websocket)
        logger.debug("Published %s to %d client(s)", event, len(targets))


hub = ConnectionHub()


def get_publisher() -> EventPublisher:
    """FastAPI dependency returning the process-wide hub."""
    return hub
