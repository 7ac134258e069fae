"""
Unit Tests for the Phase / Task Workflow

Forward-only transitions, automatic phase completion and the unlock
cascade up to roadmap completion.
"""
import pytest

from pathforge.core.exceptions import PhaseNotFoundError, ValidationError, WorkflowError
from pathforge.models.roadmap import PhaseStatus, RoadmapStatus, TaskStatus
from pathforge.services.workflow import set_phase_status, set_task_status


@pytest.mark.asyncio
class TestTaskTransitions:
    """Test task status changes and phase recomputation"""

    async def test_starting_a_task_moves_phase_and_roadmap_in_progress(self, db_session, roadmap):
        phase = roadmap.phases[0]
        task = phase.tasks[0]

        result = await set_task_status(db_session, task, phase, TaskStatus.IN_PROGRESS)

        assert task.status == TaskStatus.IN_PROGRESS
        assert task.started_at is not None
        assert result["phase_status"] == PhaseStatus.IN_PROGRESS.value
        assert result["roadmap_status"] == RoadmapStatus.IN_PROGRESS.value
        assert result["phase_completed"] is False

    async def test_completing_all_tasks_unlocks_next_phase(self, db_session, roadmap):
        first, second = roadmap.phases[0], roadmap.phases[1]

        for task in first.tasks:
            result = await set_task_status(db_session, task, first, "COMPLETED")

        assert first.status == PhaseStatus.COMPLETED
        assert second.status == PhaseStatus.ACTIVE
        assert result["phase_completed"] is True
        assert result["next_phase_unlocked"] is True
        assert result["next_phase_id"] == second.id
        assert all(t.completed_at is not None for t in first.tasks)

    async def test_task_cannot_move_backwards(self, db_session, roadmap):
        phase = roadmap.phases[0]
        task = phase.tasks[0]
        await set_task_status(db_session, task, phase, TaskStatus.COMPLETED)

        with pytest.raises(WorkflowError):
            await set_task_status(db_session, task, phase, TaskStatus.TODO)

    async def test_invalid_status_rejected(self, db_session, roadmap):
        phase = roadmap.phases[0]

        with pytest.raises(ValidationError):
            await set_task_status(db_session, phase.tasks[0], phase, "DONE")


@pytest.mark.asyncio
class TestPhaseTransitions:
    """Test leader overrides of phase status"""

    async def test_completing_every_phase_completes_roadmap(self, db_session, roadmap):
        for phase in roadmap.phases:
            result = await set_phase_status(db_session, roadmap.id, phase.id, "COMPLETED")

        assert all(p.status == PhaseStatus.COMPLETED for p in roadmap.phases)
        assert result["roadmap_status"] == RoadmapStatus.COMPLETED.value
        assert result["next_phase_unlocked"] is False

    async def test_completing_a_phase_only_unlocks_the_next_one(self, db_session, roadmap):
        await set_phase_status(db_session, roadmap.id, roadmap.phases[0].id, PhaseStatus.COMPLETED)

        assert roadmap.phases[1].status == PhaseStatus.ACTIVE
        assert all(p.status == PhaseStatus.LOCKED for p in roadmap.phases[2:])

    async def test_phase_cannot_move_backwards(self, db_session, roadmap):
        with pytest.raises(WorkflowError):
            await set_phase_status(db_session, roadmap.id, roadmap.phases[0].id, "LOCKED")

    async def test_phase_of_another_roadmap_not_found(self, db_session, roadmap):
        with pytest.raises(PhaseNotFoundError):
            await set_phase_status(db_session, "00000000-0000-0000-0000-000000000000", roadmap.phases[0].id, "ACTIVE")

    async def test_locked_phase_can_be_activated(self, db_session, roadmap):
        result = await set_phase_status(db_session, roadmap.id, roadmap.phases[3].id, "ACTIVE")

        assert result["phase_status"] == PhaseStatus.ACTIVE.value
