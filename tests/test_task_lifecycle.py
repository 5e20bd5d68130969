"""
Tests for the task lifecycle service: creation, approval, step
completion, cancellation and optimistic locking.
"""

import pytest
from sqlalchemy.exc import OperationalError

from fleet_dashboard.errors import ConflictError, InternalError, NotFoundError, ValidationFailure
from fleet_dashboard.models import Task
from fleet_dashboard.schemas.tasks import ManualStepIn, TaskUpdate
from fleet_dashboard.services import catalog as catalog_service
from fleet_dashboard.services import tasks as task_service
from fleet_dashboard.services.catalog import load_catalog


INSTRUCTION = "Load 150 tons of Material A and transport it to the crusher"


def _manual(*descriptions):
    return [ManualStepIn(description=d) for d in descriptions]


@pytest.fixture
def decomposed_task(db_session):
    return task_service.create_task(
        db_session,
        title="Feed the crusher",
        description=INSTRUCTION,
        vehicle_id="truck-001",
    )


@pytest.fixture
def four_step_task(db_session):
    return task_service.create_task(
        db_session,
        title="Inspection",
        description="Walk-around inspection",
        vehicle_id="truck-001",
        steps=_manual("Check tyres", "Check hydraulics", "Check lights", "Sign off"),
    )


# =============================================================================
# Catalog
# =============================================================================

class TestLoadCatalog:

    def test_snapshot_from_database(self, db_session):
        catalog = load_catalog(db_session, "truck-002")

        assert [v.id for v in catalog.vehicles] == ["truck-002"]
        assert [p.id for p in catalog.pois] == [
            "zone-a", "zone-b", "zone-c", "crusher-01", "loading-dock-01",
        ]
        assert [m.name for m in catalog.materials] == ["Material A", "Material B"]
        assert catalog.pois[2].materials == ("Material A", "Material B")

    def test_unknown_vehicle_is_not_an_error(self, db_session):
        catalog = load_catalog(db_session, "truck-999")
        assert catalog.vehicles == ()
        assert len(catalog.pois) == 5

    def test_lookup_failure_is_internal_error(self, db_session, monkeypatch):
        def broken(db):
            raise OperationalError("SELECT * FROM materials", {}, Exception("database is locked"))

        monkeypatch.setattr(catalog_service, "list_materials", broken)
        with pytest.raises(InternalError) as exc_info:
            load_catalog(db_session, "truck-001")
        assert exc_info.value.status_code == 500

    def test_lookup_failure_aborts_decomposition(self, db_session, monkeypatch):
        def broken(db):
            raise OperationalError("SELECT * FROM pois", {}, Exception("disk I/O error"))

        monkeypatch.setattr(catalog_service, "list_pois", broken)
        with pytest.raises(InternalError):
            task_service.decompose_instruction(db_session, INSTRUCTION, "truck-001")
        with pytest.raises(InternalError):
            task_service.create_task(db_session, title="Feed the crusher", description=INSTRUCTION)
        assert db_session.query(Task).count() == 0


# =============================================================================
# Creation
# =============================================================================

class TestCreateTask:

    def test_decomposed_task(self, decomposed_task):
        task = decomposed_task
        assert task.status == "pending_approval"
        assert task.priority == "high"
        assert task.original_instruction == INSTRUCTION
        assert task.estimated_duration == 94
        assert task.decomposition_summary == "Task decomposed into 8 steps with estimated duration of 94 minutes"
        assert task.current_step_index == 0
        assert task.version == 1
        assert len(task.steps) == 8
        assert all(s.status == "pending" for s in task.steps)
        assert task.steps[1].parameters["amount"] == 100
        assert task.steps[1].parameters["source_id"] == "zone-a"

    def test_explicit_priority_wins(self, db_session):
        task = task_service.create_task(
            db_session, title="t", description=INSTRUCTION, priority="urgent",
        )
        assert task.priority == "urgent"

    def test_original_instruction_preferred_over_description(self, db_session):
        task = task_service.create_task(
            db_session,
            title="Routine",
            description="Morning routine",
            original_instruction="Fill the crusher with Material B",
        )
        assert task.original_instruction == "Fill the crusher with Material B"
        assert task.description == "Morning routine"
        assert [s.action for s in task.steps] == ["Collect Material B", "Deliver Material B to crusher"]

    def test_manual_steps(self, db_session):
        task = task_service.create_task(
            db_session,
            title="Inspection",
            description="Walk-around inspection",
            steps=[
                ManualStepIn(description="Check tyres", estimated_duration=5),
                ManualStepIn(description="Check hydraulics"),
            ],
        )
        assert [s.description for s in task.steps] == ["Check tyres", "Check hydraulics"]
        assert [s.step_number for s in task.steps] == [1, 2]
        assert [s.estimated_duration for s in task.steps] == [5, 10]
        assert task.estimated_duration == 15
        assert task.decomposition_summary == "Manual steps provided"
        assert task.priority == "medium"

    def test_manual_step_without_description(self, db_session):
        task = task_service.create_task(
            db_session, title="t", description="d", steps=[ManualStepIn(), ManualStepIn()],
        )
        assert [s.action for s in task.steps] == ["Step 1", "Step 2"]

    def test_default_title(self, db_session):
        task = task_service.create_task(db_session, description="Inspect the haul road between zone A and the crusher")
        assert task.title == "Auto-generated: Inspect the haul road between zone A and the crush..."

    def test_nothing_to_decompose(self, db_session):
        with pytest.raises(ValidationFailure):
            task_service.create_task(db_session, title="  ", description="")

    def test_decompose_instruction_rejects_blank(self, db_session):
        with pytest.raises(ValidationFailure):
            task_service.decompose_instruction(db_session, "   ")


# =============================================================================
# Approval
# =============================================================================

class TestApproval:

    def test_approve_starts_first_step(self, db_session, decomposed_task):
        task = task_service.set_approval(db_session, decomposed_task.id, approved=True)

        assert task.status == "approved"
        assert task.approved_at is not None
        assert task.started_at is not None
        assert task.steps[0].status == "in_progress"
        assert all(s.status == "pending" for s in task.steps[1:])
        assert task.version == 2

    def test_reject_stores_feedback(self, db_session, decomposed_task):
        task = task_service.set_approval(
            db_session, decomposed_task.id, approved=False, feedback="Use Zone B instead",
        )
        assert task.status == "rejected"
        assert task.rejected_at is not None
        assert task.feedback == "Use Zone B instead"
        assert all(s.status == "pending" for s in task.steps)

    def test_second_approval_conflicts(self, db_session, decomposed_task):
        task_service.set_approval(db_session, decomposed_task.id, approved=True)
        with pytest.raises(ConflictError):
            task_service.set_approval(db_session, decomposed_task.id, approved=False)

    def test_approving_rejected_task_conflicts(self, db_session, decomposed_task):
        task_service.set_approval(db_session, decomposed_task.id, approved=False)
        with pytest.raises(ConflictError):
            task_service.set_approval(db_session, decomposed_task.id, approved=True)

    def test_unknown_task(self, db_session):
        with pytest.raises(NotFoundError):
            task_service.set_approval(db_session, "no-such-task", approved=True)


# =============================================================================
# Step Completion
# =============================================================================

class TestCompleteStep:

    def test_sequential_completion(self, db_session, four_step_task):
        task = task_service.set_approval(db_session, four_step_task.id, approved=True)
        step_ids = [s.id for s in task.steps]

        task = task_service.complete_step(db_session, task.id, step_ids[0])
        assert [s.status for s in task.steps] == ["completed", "in_progress", "pending", "pending"]
        assert task.current_step_index == 1
        assert task.completion_percentage == 25

        task = task_service.complete_step(db_session, task.id, step_ids[1])
        task = task_service.complete_step(db_session, task.id, step_ids[2])
        assert task.status == "approved"
        assert task.steps[3].status == "in_progress"

        task = task_service.complete_step(db_session, task.id, step_ids[3])
        assert task.status == "completed"
        assert task.completed_at is not None
        assert task.actual_duration is not None
        assert task.completion_percentage == 100
        assert task.current_step_index == 4
        assert task.current_step is None

    def test_completion_before_approval_conflicts(self, db_session, four_step_task):
        with pytest.raises(ConflictError):
            task_service.complete_step(db_session, four_step_task.id, four_step_task.steps[0].id)

        task = task_service.get_task(db_session, four_step_task.id)
        assert task.status == "pending_approval"
        assert [s.status for s in task.steps] == ["pending"] * 4

        task = task_service.set_approval(db_session, task.id, approved=True)
        assert [s.status for s in task.steps] == ["in_progress", "pending", "pending", "pending"]

    def test_rejected_task_cannot_run_steps(self, db_session, four_step_task):
        task_service.set_approval(db_session, four_step_task.id, approved=False)
        with pytest.raises(ConflictError):
            task_service.complete_step(db_session, four_step_task.id, four_step_task.steps[0].id)

    def test_explicit_in_progress_status_can_run_steps(self, db_session, four_step_task):
        task_service.update_task(db_session, four_step_task.id, TaskUpdate(status="in_progress"))
        task = task_service.complete_step(db_session, four_step_task.id, four_step_task.steps[0].id)
        assert task.steps[0].status == "completed"

    def test_double_completion_conflicts(self, db_session, four_step_task):
        task_service.set_approval(db_session, four_step_task.id, approved=True)
        step_id = four_step_task.steps[0].id
        task_service.complete_step(db_session, four_step_task.id, step_id)
        with pytest.raises(ConflictError):
            task_service.complete_step(db_session, four_step_task.id, step_id)

    def test_out_of_order_does_not_reopen_completed_step(self, db_session, four_step_task):
        task_service.set_approval(db_session, four_step_task.id, approved=True)
        steps = four_step_task.steps
        task_service.complete_step(db_session, four_step_task.id, steps[2].id)
        task = task_service.complete_step(db_session, four_step_task.id, steps[1].id)
        assert task.steps[2].status == "completed"
        assert task.status == "approved"

    def test_unknown_step(self, db_session, four_step_task):
        with pytest.raises(NotFoundError):
            task_service.complete_step(db_session, four_step_task.id, "no-such-step")

    def test_finished_task_conflicts(self, db_session, four_step_task):
        task_service.cancel_task(db_session, four_step_task.id)
        with pytest.raises(ConflictError):
            task_service.complete_step(db_session, four_step_task.id, four_step_task.steps[0].id)


# =============================================================================
# Cancel, Update, Delete, List
# =============================================================================

class TestOtherOperations:

    def test_cancel(self, db_session, decomposed_task):
        task = task_service.cancel_task(db_session, decomposed_task.id)
        assert task.status == "cancelled"
        with pytest.raises(ConflictError):
            task_service.cancel_task(db_session, decomposed_task.id)

    def test_update(self, db_session, decomposed_task):
        task = task_service.update_task(
            db_session, decomposed_task.id, TaskUpdate(title="Renamed", priority="low"),
        )
        assert task.title == "Renamed"
        assert task.priority == "low"
        assert task.description == INSTRUCTION

    def test_delete_removes_steps(self, db_session, decomposed_task):
        task_service.delete_task(db_session, decomposed_task.id)
        with pytest.raises(NotFoundError):
            task_service.get_task(db_session, decomposed_task.id)
        assert db_session.query(Task).count() == 0

    def test_list_filters(self, db_session, decomposed_task, four_step_task):
        task_service.set_approval(db_session, four_step_task.id, approved=True)

        assert len(task_service.list_tasks(db_session)) == 2
        approved = task_service.list_tasks(db_session, status="approved")
        assert [t.id for t in approved] == [four_step_task.id]
        high = task_service.list_tasks(db_session, priority="high")
        assert [t.id for t in high] == [decomposed_task.id]
        assert task_service.list_tasks(db_session, vehicle_id="truck-002") == []


# =============================================================================
# Concurrency
# =============================================================================

class TestOptimisticLocking:

    def test_stale_write_conflicts(self, session_factory, decomposed_task):
        """A session holding an old version cannot overwrite a newer one."""
        stale_session = session_factory()
        try:
            stale = stale_session.get(Task, decomposed_task.id)
            assert stale.version == 1

            fresh_session = session_factory()
            try:
                task_service.set_approval(fresh_session, decomposed_task.id, approved=True)
            finally:
                fresh_session.close()

            with pytest.raises(ConflictError):
                task_service.cancel_task(stale_session, decomposed_task.id)
        finally:
            stale_session.close()
