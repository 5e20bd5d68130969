"""
Vehicle Chat Service
====================

Per-vehicle message history and the canned replies a vehicle sends back to
an operator.

Replies:
--------
`generate_vehicle_reply()` scans the operator's message for command
keywords, in order, and returns the first matching reply:

    status        -> status report
    move / go     -> acknowledging a move order
    load / pick up -> acknowledging a loading order
    stop / halt   -> alert, high priority
    (anything else) -> "Command received. Processing..."
"""

import logging
import uuid
from collections import namedtuple
from typing import List

from sqlalchemy.orm import Session

from ..config import CHAT_HISTORY_LIMIT
from ..models import ChatMessage
from ..schemas.chat import ChatMessageCreate
from .helpers import store_errors


logger = logging.getLogger(__name__)


VehicleReply = namedtuple("VehicleReply", ["message", "message_type", "priority"])

DEFAULT_REPLY = VehicleReply("Command received. Processing...", "text", "normal")

# (keywords, reply); first match wins
REPLY_RULES = (
    (("status",), VehicleReply(
        "All systems operational. Battery level good. Ready for new tasks.", "status", "normal",
    )),
    (("move", "go"), VehicleReply(
        "Navigation systems engaged. Beginning movement to specified location.", "command", "normal",
    )),
    (("load", "pick up"), VehicleReply(
        "Initiating loading sequence. Positioning for material pickup.", "command", "normal",
    )),
    (("stop", "halt"), VehicleReply(
        "Emergency stop activated. All operations halted.", "alert", "high",
    )),
)


def generate_vehicle_reply(user_message: str) -> VehicleReply:
    """Pick the canned reply for an operator message."""
    text = (user_message or "").lower()
    for keywords, reply in REPLY_RULES:
        if any(keyword in text for keyword in keywords):
            return reply
    return DEFAULT_REPLY


def list_messages(db: Session, vehicle_id: str, limit: int = CHAT_HISTORY_LIMIT, skip: int = 0) -> List[ChatMessage]:
    """
    The most recent `limit` messages for a vehicle (after skipping `skip`
    newer ones), returned oldest first.
    """
    with store_errors(db, "list chat messages"):
        newest_first = (
            db.query(ChatMessage)
            .filter(ChatMessage.vehicle_id == vehicle_id)
            .order_by(ChatMessage.timestamp.desc(), ChatMessage.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
    return list(reversed(newest_first))


def post_message(db: Session, vehicle_id: str, payload: ChatMessageCreate) -> ChatMessage:
    message = ChatMessage(
        id=str(uuid.uuid4()),
        vehicle_id=vehicle_id,
        message=payload.message,
        sender=payload.sender,
        message_type=payload.message_type,
        priority=payload.priority,
        is_read=False,
        related_task_id=payload.related_task_id,
    )
    db.add(message)
    with store_errors(db, "save chat message"):
        db.commit()
    db.refresh(message)

    logger.info("Chat message %s from %s to vehicle %s", message.id, message.sender, vehicle_id)
    return message


def reply_as_vehicle(db: Session, vehicle_id: str, user_message: str) -> ChatMessage:
    """Generate and store the vehicle's reply to an operator message."""
    reply = generate_vehicle_reply(user_message)
    message = ChatMessage(
        id=str(uuid.uuid4()),
        vehicle_id=vehicle_id,
        message=reply.message,
        sender="vehicle",
        message_type=reply.message_type,
        priority=reply.priority,
        is_read=False,
    )
    db.add(message)
    with store_errors(db, "save vehicle reply"):
        db.commit()
    db.refresh(message)

    logger.debug("Vehicle %s replied: %s", vehicle_id, reply.message)
    return message
