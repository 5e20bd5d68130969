"""
Chat Schemas for the Fleet Dashboard.

Operators chat with individual vehicles. Messages are stored per vehicle
and pushed to subscribers of the vehicle's WebSocket room.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import MAX_MESSAGE_LENGTH
from .common import ChatMessageType, ChatPriority, ChatSender


class ChatMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vehicle_id: str
    message: str
    sender: str
    message_type: str
    priority: str
    timestamp: datetime
    is_read: bool
    related_task_id: Optional[str] = None


class ChatMessageCreate(BaseModel):
    """
    Request model for posting a message to a vehicle.

    Example:
        {"message": "Head to Zone B", "sender": "operator"}
    """
    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    sender: ChatSender
    message_type: ChatMessageType = "text"
    priority: ChatPriority = "normal"
    related_task_id: Optional[str] = None


class VehicleReplyRequest(BaseModel):
    """Request model for a generated vehicle reply."""
    user_message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
