"""
Task Lifecycle Service
======================

Creates tasks from natural-language instructions (or caller-supplied steps)
and drives them through approval and step-by-step execution.

State Machine:
--------------
    pending_approval --set_approval(True)--> approved --last step--> completed
    pending_approval --set_approval(False)-> rejected
    any non-terminal --cancel_task---------> cancelled

Terminal statuses: completed, rejected, cancelled.

Step Cursor:
------------
Steps can only be completed once the task is approved (or explicitly set
in_progress). `Task.current_step_index` points at the step in progress.
Approval starts step 0; completing step i starts step i+1 (when it is still pending) and
completing the last step by position completes the task and records its
actual duration. Steps may be completed in any order; only the cursor
and the final transition depend on position.

Concurrency:
------------
Every mutation bumps `Task.version` (SQLAlchemy version_id_col). Two
requests racing on the same task cannot both commit: the loser gets a
ConflictError and should reload and retry.

Errors:
-------
- NotFoundError: unknown task or step id
- ValidationFailure: nothing to decompose
- ConflictError: transition not allowed from the current status, step
  completed before approval or already completed, or lost a concurrent update
- InternalError: any other persistence failure
"""

import logging
import uuid
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError, ValidationFailure
from ..models import Task, TaskStep, utcnow
from ..planning import Decomposition, decompose
from ..schemas.tasks import ManualStepIn, TaskUpdate
from .catalog import load_catalog
from .helpers import store_errors


logger = logging.getLogger(__name__)


STATUS_PENDING_APPROVAL = "pending_approval"
STATUS_APPROVED = "approved"
STATUS_IN_PROGRESS = "in_progress"
STATUS_REJECTED = "rejected"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

TERMINAL_STATUSES = frozenset({STATUS_COMPLETED, STATUS_REJECTED, STATUS_CANCELLED})
EXECUTABLE_STATUSES = frozenset({STATUS_APPROVED, STATUS_IN_PROGRESS})

STEP_PENDING = "pending"
STEP_IN_PROGRESS = "in_progress"
STEP_COMPLETED = "completed"

DEFAULT_MANUAL_STEP_DURATION = 10  # minutes
TITLE_PREFIX_LENGTH = 50
MANUAL_STEPS_SUMMARY = "Manual steps provided"


def default_title(instruction: str) -> str:
    """"Auto-generated: " plus the first 50 characters of the instruction."""
    return f"Auto-generated: {instruction[:TITLE_PREFIX_LENGTH]}..."


def decompose_instruction(
    db: Session,
    instruction: str,
    vehicle_id: Optional[str] = None,
) -> Decomposition:
    """
    Plan an instruction against the current catalog without persisting it.

    Raises:
        ValidationFailure: if the instruction is blank
        InternalError: if the catalog cannot be loaded
    """
    if not instruction or not instruction.strip():
        raise ValidationFailure("Instruction must not be empty")

    catalog = load_catalog(db, vehicle_id)
    plan = decompose(instruction, vehicle_id=vehicle_id, catalog=catalog)
    logger.info(
        "Decomposed instruction for vehicle %s: %s, %d steps, %d minutes",
        vehicle_id,
        plan.strategy,
        len(plan.steps),
        plan.estimated_duration,
    )
    return plan


def _manual_steps(steps: Sequence[ManualStepIn], instruction: str, vehicle_id: Optional[str]) -> List[TaskStep]:
    rows = []
    for number, step in enumerate(steps, start=1):
        description = step.description or step.action or f"Step {number}"
        duration = step.estimated_duration
        rows.append(TaskStep(
            id=str(uuid.uuid4()),
            step_number=number,
            action=step.action or description,
            description=description,
            estimated_duration=DEFAULT_MANUAL_STEP_DURATION if duration is None else duration,
            status=STEP_PENDING,
            parameters={"vehicle_id": vehicle_id, "instruction": instruction},
            results={},
        ))
    return rows


def _planned_steps(plan: Decomposition) -> List[TaskStep]:
    return [
        TaskStep(
            id=step.id,
            step_number=step.step_number,
            action=step.action,
            description=step.description,
            estimated_duration=step.estimated_duration,
            status=STEP_PENDING,
            parameters=step.parameters.to_dict(),
            results={},
        )
        for step in plan.steps
    ]


def create_task(
    db: Session,
    title: Optional[str] = None,
    description: Optional[str] = None,
    vehicle_id: Optional[str] = None,
    priority: Optional[str] = None,
    original_instruction: Optional[str] = None,
    steps: Optional[Sequence[ManualStepIn]] = None,
) -> Task:
    """
    Create a task awaiting approval.

    The instruction is `original_instruction`, falling back to the
    description. Without manual steps the instruction is decomposed and the
    plan's priority is used unless one is given.

    Raises:
        ValidationFailure: if there is no instruction, description or title
        InternalError: if the catalog lookup or the insert fails
    """
    instruction = (original_instruction or description or title or "").strip()
    if not instruction:
        raise ValidationFailure("A title, description or instruction is required")

    if steps:
        step_rows = _manual_steps(steps, instruction, vehicle_id)
        summary = MANUAL_STEPS_SUMMARY
        planned_priority = None
    else:
        plan = decompose_instruction(db, instruction, vehicle_id)
        step_rows = _planned_steps(plan)
        summary = plan.summary
        planned_priority = plan.priority

    task = Task(
        id=str(uuid.uuid4()),
        title=title or default_title(instruction),
        description=description or instruction,
        original_instruction=instruction,
        vehicle_id=vehicle_id,
        status=STATUS_PENDING_APPROVAL,
        priority=priority or planned_priority or "medium",
        estimated_duration=sum(s.estimated_duration for s in step_rows),
        decomposition_summary=summary,
        current_step_index=0,
    )
    task.steps = step_rows

    db.add(task)
    with store_errors(db, "create task"):
        db.commit()
    db.refresh(task)

    logger.info(
        "Created task %s for vehicle %s: %d steps, %d minutes",
        task.id,
        vehicle_id,
        len(task.steps),
        task.estimated_duration,
    )
    return task


def get_task(db: Session, task_id: str) -> Task:
    """
    Raises:
        NotFoundError: if the task does not exist
    """
    with store_errors(db, "load task"):
        task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def list_tasks(
    db: Session,
    status: Optional[str] = None,
    vehicle_id: Optional[str] = None,
    priority: Optional[str] = None,
) -> List[Task]:
    """Tasks matching the filters, newest first."""
    query = db.query(Task)
    if status:
        query = query.filter(Task.status == status)
    if vehicle_id:
        query = query.filter(Task.vehicle_id == vehicle_id)
    if priority:
        query = query.filter(Task.priority == priority)
    with store_errors(db, "list tasks"):
        return query.order_by(Task.created_at.desc(), Task.id).all()


def _touch(task: Task) -> None:
    # Forces an UPDATE of the task row so the version check runs even when
    # only step rows changed.
    task.updated_at = utcnow()


def set_approval(
    db: Session,
    task_id: str,
    approved: bool,
    feedback: Optional[str] = None,
) -> Task:
    """
    Approve or reject a task's plan.

    Approval starts the first step. Rejection stores the feedback.

    Raises:
        NotFoundError: if the task does not exist
        ConflictError: if the task is not pending approval
    """
    task = get_task(db, task_id)
    if task.status != STATUS_PENDING_APPROVAL:
        raise ConflictError(f"Task {task_id} is {task.status}, not awaiting approval")

    now = utcnow()
    if approved:
        task.status = STATUS_APPROVED
        task.approved_at = now
        task.started_at = now
        task.current_step_index = 0
        if task.steps:
            first = task.steps[0]
            first.status = STEP_IN_PROGRESS
            first.started_at = now
    else:
        task.status = STATUS_REJECTED
        task.rejected_at = now
        task.feedback = feedback
    _touch(task)

    with store_errors(db, "update task approval"):
        db.commit()
    db.refresh(task)

    logger.info("Task %s %s", task.id, "approved" if approved else "rejected")
    return task


def complete_step(db: Session, task_id: str, step_id: str) -> Task:
    """
    Mark one step completed and advance the cursor.

    Raises:
        NotFoundError: if the task or step does not exist
        ConflictError: if the task is not approved and running, or the step
            is already completed
    """
    task = get_task(db, task_id)

    index = next((i for i, s in enumerate(task.steps) if s.id == step_id), None)
    if index is None:
        raise NotFoundError("Step", step_id)
    if task.status not in EXECUTABLE_STATUSES:
        raise ConflictError(f"Task {task_id} is {task.status}; steps run only after approval")

    step = task.steps[index]
    if step.status == STEP_COMPLETED:
        raise ConflictError(f"Step {step_id} is already completed")

    now = utcnow()
    step.status = STEP_COMPLETED
    step.completed_at = now
    task.current_step_index = index + 1

    if index + 1 < len(task.steps):
        following = task.steps[index + 1]
        if following.status == STEP_PENDING:
            following.status = STEP_IN_PROGRESS
            following.started_at = now
    else:
        task.status = STATUS_COMPLETED
        task.completed_at = now
        if task.started_at is not None:
            task.actual_duration = round((now - task.started_at).total_seconds() / 60)
    _touch(task)

    with store_errors(db, "complete step"):
        db.commit()
    db.refresh(task)

    logger.info(
        "Task %s step %d/%d completed (task %s)",
        task.id,
        index + 1,
        len(task.steps),
        task.status,
    )
    return task


def cancel_task(db: Session, task_id: str) -> Task:
    """
    Raises:
        NotFoundError: if the task does not exist
        ConflictError: if the task is already finished
    """
    task = get_task(db, task_id)
    if task.status in TERMINAL_STATUSES:
        raise ConflictError(f"Task {task_id} is already {task.status}")

    task.status = STATUS_CANCELLED
    task.completed_at = utcnow()
    _touch(task)

    with store_errors(db, "cancel task"):
        db.commit()
    db.refresh(task)

    logger.info("Cancelled task %s", task.id)
    return task


def update_task(db: Session, task_id: str, payload: TaskUpdate) -> Task:
    """Apply a partial update to a task's descriptive fields or status."""
    task = get_task(db, task_id)

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(task, field, value)
    _touch(task)

    with store_errors(db, "update task"):
        db.commit()
    db.refresh(task)

    logger.info("Updated task %s: %s", task.id, sorted(update_data))
    return task


def delete_task(db: Session, task_id: str) -> None:
    task = get_task(db, task_id)
    db.delete(task)
    with store_errors(db, "delete task"):
        db.commit()
    logger.info("Deleted task %s", task_id)
