"""
Chat Routes for the Fleet Dashboard
===================================

Per-vehicle message threads between operators and vehicles.

Endpoints:
----------
- GET /chat/{vehicle_id}: Message history, oldest first (limit, skip)
- POST /chat/{vehicle_id}: Post a message
- POST /chat/{vehicle_id}/ai-response: Store and return the vehicle's
  canned reply to an operator message

Both POST endpoints push the stored message to the vehicle's room as
new-message.
"""

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..config import CHAT_HISTORY_LIMIT
from ..db import get_db
from ..errors import FleetError
from ..schemas.chat import ChatMessageCreate, ChatMessageOut, VehicleReplyRequest
from ..services import chat as chat_service
from ..services.events import NEW_MESSAGE, EventPublisher, get_publisher, vehicle_room


logger = logging.getLogger(__name__)

# Router definition
chat_router = APIRouter(prefix="/chat", tags=["Chat"])


@chat_router.get("/{vehicle_id}", response_model=List[ChatMessageOut])
def list_messages(
    vehicle_id: str,
    limit: int = Query(CHAT_HISTORY_LIMIT, ge=1, le=500),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[ChatMessageOut]:
    try:
        messages = chat_service.list_messages(db, vehicle_id, limit=limit, skip=skip)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return [ChatMessageOut.model_validate(m) for m in messages]


@chat_router.post("/{vehicle_id}", response_model=ChatMessageOut, status_code=201)
def post_message(
    vehicle_id: str,
    payload: ChatMessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> ChatMessageOut:
    try:
        message = chat_service.post_message(db, vehicle_id, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    message_out = ChatMessageOut.model_validate(message)
    background_tasks.add_task(
        publisher.publish, NEW_MESSAGE, message_out.model_dump(mode="json"), vehicle_room(vehicle_id)
    )
    return message_out


@chat_router.post("/{vehicle_id}/ai-response", response_model=ChatMessageOut)
def vehicle_reply(
    vehicle_id: str,
    payload: VehicleReplyRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> ChatMessageOut:
    """Generate the vehicle's reply to an operator message."""
    try:
        message = chat_service.reply_as_vehicle(db, vehicle_id, payload.user_message)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    message_out = ChatMessageOut.model_validate(message)
    background_tasks.add_task(
        publisher.publish, NEW_MESSAGE, message_out.model_dump(mode="json"), vehicle_room(vehicle_id)
    )
    return message_out
