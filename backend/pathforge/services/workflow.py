"""
Phase / task state machine.

    Phase:  LOCKED -> ACTIVE -> IN_PROGRESS -> COMPLETED
    Task:   TODO -> IN_PROGRESS -> COMPLETED

Statuses only move forward (steps may be skipped). Every path that changes
a task status ends in ``recompute_phase``; every path that completes a
phase ends in ``complete_phase``, which unlocks the next phase and rolls
the roadmap status up.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.exceptions import PhaseNotFoundError, ValidationError, WorkflowError
from pathforge.core.logging_config import logger
from pathforge.models.roadmap import (
    Phase, PhaseStatus, Roadmap, RoadmapStatus, Task, TaskStatus,
)

PHASE_ORDER = [PhaseStatus.LOCKED, PhaseStatus.ACTIVE, PhaseStatus.IN_PROGRESS, PhaseStatus.COMPLETED]
TASK_ORDER = [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]


def parse_phase_status(value) -> PhaseStatus:
    try:
        return PhaseStatus(value)
    except ValueError:
        raise ValidationError("Invalid status", field="status")


def parse_task_status(value) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError("Invalid status", field="status")


def _check_forward(order: list, current, new, entity: str) -> None:
    if order.index(new) < order.index(current):
        raise WorkflowError(
            f"{entity} status cannot move from {current.value} back to {new.value}",
            details={"current_status": current.value, "requested_status": new.value},
        )


def _result(phase: Phase, roadmap: Optional[Roadmap], next_phase: Optional[Phase] = None,
            phase_completed: bool = False) -> Dict[str, Any]:
    return {
        "phase_status": phase.status.value,
        "phase_completed": phase_completed,
        "next_phase_unlocked": next_phase is not None,
        "next_phase_id": next_phase.id if next_phase else None,
        "roadmap_status": roadmap.status.value if roadmap else None,
    }


async def _get_roadmap(db: AsyncSession, roadmap_id: str) -> Optional[Roadmap]:
    result = await db.execute(select(Roadmap).where(Roadmap.id == roadmap_id))
    return result.scalar_one_or_none()


def _set_roadmap_status(roadmap: Roadmap, status: RoadmapStatus) -> None:
    if roadmap.status != status:
        old = roadmap.status.value if roadmap.status else None
        roadmap.status = status
        logger.log_workflow_event("roadmap", roadmap.id, old, status.value)


async def complete_phase(db: AsyncSession, phase: Phase) -> Dict[str, Any]:
    """
    Mark a phase COMPLETED and run the cascade: unlock the phase with
    order + 1 when it is LOCKED, then set the roadmap COMPLETED if every
    phase is done, IN_PROGRESS otherwise.
    """
    if phase.status != PhaseStatus.COMPLETED:
        old = phase.status.value
        phase.status = PhaseStatus.COMPLETED
        logger.log_workflow_event("phase", phase.id, old, PhaseStatus.COMPLETED.value, order=phase.order)

    result = await db.execute(
        select(Phase).where(Phase.roadmap_id == phase.roadmap_id).order_by(Phase.order)
    )
    phases = result.scalars().all()

    next_phase = None
    for candidate in phases:
        if candidate.order == phase.order + 1 and candidate.status == PhaseStatus.LOCKED:
            candidate.status = PhaseStatus.ACTIVE
            next_phase = candidate
            logger.log_workflow_event(
                "phase", candidate.id, PhaseStatus.LOCKED.value, PhaseStatus.ACTIVE.value, order=candidate.order
            )

    roadmap = await _get_roadmap(db, phase.roadmap_id)
    if roadmap:
        if all(p.status == PhaseStatus.COMPLETED for p in phases):
            _set_roadmap_status(roadmap, RoadmapStatus.COMPLETED)
        else:
            _set_roadmap_status(roadmap, RoadmapStatus.IN_PROGRESS)

    await db.flush()
    return _result(phase, roadmap, next_phase=next_phase, phase_completed=True)


async def recompute_phase(db: AsyncSession, phase: Phase) -> Dict[str, Any]:
    """
    Derive the phase status from its tasks after a task changed.

    All tasks completed -> phase completed (with cascade). Any task started
    while the phase is ACTIVE -> phase IN_PROGRESS.
    """
    result = await db.execute(select(Task).where(Task.phase_id == phase.id))
    tasks = result.scalars().all()

    if tasks and all(t.status == TaskStatus.COMPLETED for t in tasks):
        return await complete_phase(db, phase)

    started = any(t.status in (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED) for t in tasks)
    if started and phase.status == PhaseStatus.ACTIVE:
        phase.status = PhaseStatus.IN_PROGRESS
        logger.log_workflow_event(
            "phase", phase.id, PhaseStatus.ACTIVE.value, PhaseStatus.IN_PROGRESS.value, order=phase.order
        )

    roadmap = await _get_roadmap(db, phase.roadmap_id)
    if started and roadmap and roadmap.status == RoadmapStatus.GENERATED:
        _set_roadmap_status(roadmap, RoadmapStatus.IN_PROGRESS)

    await db.flush()
    return _result(phase, roadmap)


async def set_phase_status(db: AsyncSession, roadmap_id: str, phase_id: str, status) -> Dict[str, Any]:
    """Leader override of a phase status. COMPLETED runs the cascade."""
    new_status = parse_phase_status(status)

    result = await db.execute(select(Phase).where(Phase.id == str(phase_id)))
    phase = result.scalar_one_or_none()
    if not phase or str(phase.roadmap_id) != str(roadmap_id):
        raise PhaseNotFoundError(phase_id)

    _check_forward(PHASE_ORDER, phase.status, new_status, "Phase")

    if new_status == PhaseStatus.COMPLETED:
        return await complete_phase(db, phase)

    if phase.status != new_status:
        old = phase.status.value
        phase.status = new_status
        logger.log_workflow_event("phase", phase.id, old, new_status.value, order=phase.order)
        await db.flush()

    roadmap = await _get_roadmap(db, phase.roadmap_id)
    return _result(phase, roadmap)


async def set_task_status(db: AsyncSession, task: Task, phase: Phase, status) -> Dict[str, Any]:
    """Change a task status, stamp its timestamps and recompute the phase"""
    new_status = parse_task_status(status)
    _check_forward(TASK_ORDER, task.status, new_status, "Task")

    if task.status != new_status:
        old = task.status.value
        task.status = new_status
        logger.log_workflow_event("task", task.id, old, new_status.value, phase_id=phase.id)

    now = datetime.utcnow()
    if new_status in (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED) and not task.started_at:
        task.started_at = now
    if new_status == TaskStatus.COMPLETED:
        task.completed_at = now

    return await recompute_phase(db, phase)
