"""
WebSocket Route for the Fleet Dashboard
=======================================

A single socket endpoint carries every server-to-client notification and
the small set of client actions.

Client Frames:
--------------
    {"action": "join-vehicle", "vehicle_id": "truck-001"}
    {"action": "leave-vehicle", "vehicle_id": "truck-001"}
    {"action": "send-message", "vehicle_id": "truck-001",
     "message": "Head to Zone B", "sender": "operator"}

send-message is relayed to the vehicle's room as new-message; it is not
stored (use POST /chat/{vehicle_id} for persisted messages). A malformed
frame gets an "error" event back and the socket stays open.
"""

import json
import logging
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..models import utcnow
from ..services.events import NEW_MESSAGE, hub, vehicle_room


logger = logging.getLogger(__name__)

# Router definition
events_router = APIRouter(tags=["Events"])

ERROR_EVENT = "error"


async def _send_error(websocket: WebSocket, detail: str) -> None:
    await websocket.send_json({"event": ERROR_EVENT, "data": {"detail": detail}})


@events_router.websocket("/ws")
async def event_stream(websocket: WebSocket):
    await hub.connect(websocket)
    try:
        while True:
            try:
                frame = json.loads(await websocket.receive_text())
            except ValueError:
                await _send_error(websocket, "Frames must be valid JSON")
                continue
            if not isinstance(frame, dict):
                await _send_error(websocket, "Frames must be JSON objects")
                continue

            action = frame.get("action")
            vehicle_id = frame.get("vehicle_id")
            if not vehicle_id:
                await _send_error(websocket, "vehicle_id is required")
                continue

            room = vehicle_room(vehicle_id)
            if action == "join-vehicle":
                hub.join(websocket, room)
                logger.debug("Client joined %s", room)
            elif action == "leave-vehicle":
                hub.leave(websocket, room)
                logger.debug("Client left %s", room)
            elif action == "send-message":
                message = frame.get("message")
                if not message:
                    await _send_error(websocket, "message is required")
                    continue
                await hub.publish(NEW_MESSAGE, {
                    "id": str(uuid.uuid4()),
                    "vehicle_id": vehicle_id,
                    "message": message,
                    "sender": frame.get("sender", "user"),
                    "timestamp": utcnow().isoformat(),
                }, room=room)
            else:
                await _send_error(websocket, f"Unknown action: {action}")
    except WebSocketDisconnect:
        logger.debug("Client closed the socket")
    finally:
        hub.disconnect(websocket)
