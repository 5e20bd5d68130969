"""
Task Schemas for the Fleet Dashboard
====================================

Pydantic models for task creation, the approval flow and plan previews.

Endpoint Coverage:
------------------
- GET /tasks: List tasks (filter by status, vehicle_id, priority)
- POST /tasks: Create a task (decomposed automatically unless steps are given)
- POST /tasks/decompose: Preview the plan for an instruction without saving
- GET /tasks/{id}: Task details with steps
- PUT /tasks/{id}: Partial update
- DELETE /tasks/{id}: Delete
- POST /tasks/{id}/approval: Approve or reject the proposed plan
- POST /tasks/{id}/cancel: Cancel a task that has not finished
- POST /tasks/{id}/steps/{step_id}/complete: Mark a step done

Task Lifecycle:
---------------
    pending_approval --approve--> approved --last step done--> completed
    pending_approval --reject---> rejected
    (any non-terminal) --cancel--> cancelled

A new task is always pending_approval with every step pending.

Manual Steps:
-------------
Sending `steps` on create bypasses decomposition. Each supplied step keeps
its description and order; ids and step numbers are generated and a step
without a duration is estimated at 10 minutes. `estimated_time` is accepted
as an alias of `estimated_duration`.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .common import TaskPriority, TaskStatus


class TaskStepOut(BaseModel):
    """
    Response model for one step of a task plan.

    Attributes:
        id: Step identifier (uuid)
        step_number: 1-based position in the plan
        action: Short label, e.g. "Load 100 tons of Material A"
        description: Longer explanation
        estimated_duration: Minutes
        status: pending, in_progress, completed, failed or skipped
        parameters: vehicle_id plus any of material, amount, destination,
            source_id, destination_id, instruction
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    step_number: int
    action: str
    description: str
    estimated_duration: int
    status: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    parameters: Dict[str, Any] = {}
    results: Dict[str, Any] = {}


class TaskOut(BaseModel):
    """Response model for a task with its full plan."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    original_instruction: str
    vehicle_id: Optional[str] = None
    status: str
    priority: str
    estimated_duration: int
    actual_duration: Optional[int] = None
    decomposition_summary: Optional[str] = None
    feedback: Optional[str] = None
    current_step_index: int = 0
    version: int
    steps: List[TaskStepOut] = []
    completion_percentage: int = 0
    elapsed_time: int = 0
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ManualStepIn(BaseModel):
    """A caller-supplied step; bypasses decomposition."""
    action: Optional[str] = None
    description: Optional[str] = None
    estimated_duration: Optional[int] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("estimated_duration", "estimated_time"),
    )


class TaskCreate(BaseModel):
    """
    Request model for creating a task.

    Example (decomposed):
        {
            "title": "Feed the crusher",
            "description": "Load 150 tons of Material A and transport it to the crusher",
            "vehicle_id": "truck-001"
        }

    Example (manual steps):
        {
            "title": "Inspection",
            "description": "Walk-around inspection",
            "steps": [
                {"description": "Check tyres", "estimated_time": 5},
                {"description": "Check hydraulics"}
            ]
        }
    """
    title: str
    description: str
    vehicle_id: Optional[str] = None
    priority: Optional[TaskPriority] = None
    original_instruction: Optional[str] = None
    steps: Optional[List[ManualStepIn]] = None


class TaskUpdate(BaseModel):
    """Request model for a partial task update."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    vehicle_id: Optional[str] = None
    feedback: Optional[str] = None


class TaskApprovalRequest(BaseModel):
    """
    Approve or reject a proposed plan.

    Example:
        {"approved": false, "feedback": "Use Zone B instead"}
    """
    approved: bool
    feedback: Optional[str] = None


class DecomposeRequest(BaseModel):
    """Request model for a plan preview."""
    instruction: str = Field(..., min_length=1)
    vehicle_id: Optional[str] = None


class PlannedStepOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    step_number: int
    action: str
    description: str
    estimated_duration: int
    status: str
    parameters: Dict[str, Any] = {}

    @field_validator("parameters", mode="before")
    @classmethod
    def _parameters_to_dict(cls, value):
        if hasattr(value, "to_dict"):
            return value.to_dict()
        return value


class DecompositionOut(BaseModel):
    """
    Response model for a plan preview.

    Attributes:
        strategy: load_and_transport, clear_zone, fill_crusher or generic
        steps: Planned steps in execution order
        estimated_duration: Total minutes
        priority: Suggested priority
        summary: Human-readable step count and duration
    """
    model_config = ConfigDict(from_attributes=True)

    strategy: str
    steps: List[PlannedStepOut]
    estimated_duration: int
    priority: str
    summary: str
