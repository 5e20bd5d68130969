"""
Task Routes for the Fleet Dashboard
===================================

Endpoints for turning operator instructions into task plans and driving
those plans through approval and execution.

Endpoints:
----------
- GET /tasks: List tasks, newest first (filter by status, vehicle_id, priority)
- POST /tasks: Create a task; decomposed automatically unless steps are given
- POST /tasks/decompose: Preview a plan without saving it
- GET /tasks/{id}: Task details with steps
- PUT /tasks/{id}: Partial update
- DELETE /tasks/{id}: Delete a task and its steps
- POST /tasks/{id}/approval: Approve or reject the plan
- POST /tasks/{id}/cancel: Cancel an unfinished task
- POST /tasks/{id}/steps/{step_id}/complete: Complete one step

Broadcasts:
-----------
Every successful mutation schedules a broadcast after the response is
built: task-created, task-updated (approval, step completion, cancel,
update) or task-deleted with {"id": ...}.

Status Codes:
-------------
- 400: Nothing to decompose
- 404: Unknown task or step
- 409: Transition not allowed, step already completed, or a concurrent
  update won the race (reload and retry)
- 422: Malformed request body

Usage:
------
    POST /api/tasks
    {
        "title": "Feed the crusher",
        "description": "Load 150 tons of Material A and transport it to the crusher",
        "vehicle_id": "truck-001"
    }

    POST /api/tasks/{id}/approval
    {"approved": true}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import FleetError
from ..schemas.tasks import (
    DecomposeRequest,
    DecompositionOut,
    TaskApprovalRequest,
    TaskCreate,
    TaskOut,
    TaskUpdate,
)
from ..services import tasks as task_service
from ..services.events import (
    TASK_CREATED,
    TASK_DELETED,
    TASK_UPDATED,
    EventPublisher,
    get_publisher,
)


logger = logging.getLogger(__name__)

# Router definition
tasks_router = APIRouter(prefix="/tasks", tags=["Tasks"])


def _announce(background_tasks: BackgroundTasks, publisher: EventPublisher, event: str, task_out: TaskOut) -> None:
    background_tasks.add_task(publisher.publish, event, task_out.model_dump(mode="json"))


# =============================================================================
# Planning
# =============================================================================

@tasks_router.post("/decompose", response_model=DecompositionOut)
def preview_decomposition(
    payload: DecomposeRequest,
    db: Session = Depends(get_db),
) -> DecompositionOut:
    """Plan an instruction against the current catalog without creating a task."""
    try:
        plan = task_service.decompose_instruction(db, payload.instruction, payload.vehicle_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return DecompositionOut.model_validate(plan)


# =============================================================================
# Task CRUD
# =============================================================================

@tasks_router.get("", response_model=List[TaskOut])
def list_tasks(
    status: Optional[str] = Query(None),
    vehicle_id: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> List[TaskOut]:
    try:
        tasks = task_service.list_tasks(db, status=status, vehicle_id=vehicle_id, priority=priority)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return [TaskOut.model_validate(t) for t in tasks]


@tasks_router.post("", response_model=TaskOut, status_code=201)
def create_task(
    payload: TaskCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> TaskOut:
    """Create a task awaiting approval."""
    if not payload.title.strip() or not payload.description.strip():
        raise HTTPException(status_code=400, detail="Title and description are required")

    try:
        task = task_service.create_task(
            db,
            title=payload.title,
            description=payload.description,
            vehicle_id=payload.vehicle_id,
            priority=payload.priority,
            original_instruction=payload.original_instruction,
            steps=payload.steps,
        )
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    task_out = TaskOut.model_validate(task)
    _announce(background_tasks, publisher, TASK_CREATED, task_out)
    return task_out


@tasks_router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, db: Session = Depends(get_db)) -> TaskOut:
    try:
        task = task_service.get_task(db, task_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    return TaskOut.model_validate(task)


@tasks_router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> TaskOut:
    try:
        task = task_service.update_task(db, task_id, payload)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    task_out = TaskOut.model_validate(task)
    _announce(background_tasks, publisher, TASK_UPDATED, task_out)
    return task_out


@tasks_router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> None:
    try:
        task_service.delete_task(db, task_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    background_tasks.add_task(publisher.publish, TASK_DELETED, {"id": task_id})


# =============================================================================
# Lifecycle
# =============================================================================

@tasks_router.post("/{task_id}/approval", response_model=TaskOut)
def set_approval(
    task_id: str,
    payload: TaskApprovalRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> TaskOut:
    """Approve (starts the first step) or reject (stores feedback) a plan."""
    try:
        task = task_service.set_approval(db, task_id, payload.approved, payload.feedback)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    task_out = TaskOut.model_validate(task)
    _announce(background_tasks, publisher, TASK_UPDATED, task_out)
    return task_out


@tasks_router.post("/{task_id}/cancel", response_model=TaskOut)
def cancel_task(
    task_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> TaskOut:
    try:
        task = task_service.cancel_task(db, task_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    task_out = TaskOut.model_validate(task)
    _announce(background_tasks, publisher, TASK_UPDATED, task_out)
    return task_out


@tasks_router.post("/{task_id}/steps/{step_id}/complete", response_model=TaskOut)
def complete_step(
    task_id: str,
    step_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
) -> TaskOut:
    """Mark a step completed; completing the last step completes the task."""
    try:
        task = task_service.complete_step(db, task_id, step_id)
    except FleetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    task_out = TaskOut.model_validate(task)
    _announce(background_tasks, publisher, TASK_UPDATED, task_out)
    return task_out
