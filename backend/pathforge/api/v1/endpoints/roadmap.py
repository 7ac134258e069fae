"""
Roadmap API

Generation, lookup and the leader-driven status overrides. Task and phase
status changes run through the workflow module's unlock cascade.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from pathforge.core.database import get_db
from pathforge.core.exceptions import RoadmapNotFoundError, TaskNotFoundError
from pathforge.core.logging_config import logger
from pathforge.models.roadmap import Roadmap
from pathforge.models.team import Team
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import get_current_user, require_leader, require_onboarding
from pathforge.schemas.roadmap import (
    RoadmapGenerate, StatusUpdate, TaskAssign,
    RoadmapResponse, TaskResponse, PhaseStatusResponse, TaskStatusResponse,
)
from pathforge.services import roadmap_service, workflow

router = APIRouter()


async def get_roadmap_or_404(roadmap_id: str, db: AsyncSession) -> Roadmap:
    roadmap = await roadmap_service.get_roadmap_with_details(db, roadmap_id)
    if not roadmap:
        raise RoadmapNotFoundError(roadmap_id)
    return roadmap


async def require_team_leader(roadmap_id: str, user: User, db: AsyncSession) -> Team:
    """The caller must lead the team that owns the roadmap"""
    result = await db.execute(
        select(Team).join(Roadmap, Roadmap.team_id == Team.id).where(Roadmap.id == roadmap_id)
    )
    team = result.scalar_one_or_none()
    if not team:
        raise RoadmapNotFoundError(roadmap_id)
    if str(team.leader_id) != str(user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the team leader can perform this action")
    return team


@router.post("/generate", response_model=RoadmapResponse, status_code=status.HTTP_201_CREATED)
async def generate_roadmap(
    request: RoadmapGenerate,
    current_user: User = Depends(require_onboarding),
    db: AsyncSession = Depends(get_db)
):
    """Generate (or return the existing) roadmap for a team"""
    if not request.team_id or not request.project_id or not request.build_mode:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="team_id, project_id and build_mode are required"
        )

    roadmap = await roadmap_service.generate_roadmap(db, request.team_id, request.project_id, request.build_mode)
    return roadmap


@router.get("/team/{team_id}", response_model=RoadmapResponse)
async def get_team_roadmap(
    team_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    roadmap = await roadmap_service.get_team_roadmap(db, team_id)
    if not roadmap:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Roadmap not found for this team")
    return roadmap


@router.get("/{roadmap_id}", response_model=RoadmapResponse)
async def get_roadmap(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await get_roadmap_or_404(roadmap_id, db)


@router.patch("/{roadmap_id}/phase/{phase_id}/status", response_model=PhaseStatusResponse)
async def update_phase_status(
    roadmap_id: str,
    phase_id: str,
    update: StatusUpdate,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    """Leader override of a phase status; COMPLETED unlocks the next phase"""
    await require_team_leader(roadmap_id, current_user, db)
    result = await workflow.set_phase_status(db, roadmap_id, phase_id, update.status)

    logger.info(f"Phase {phase_id} set to {result['phase_status']} by {current_user.id}")
    return PhaseStatusResponse(message="Phase status updated", **result)


@router.patch("/task/{task_id}/status", response_model=TaskStatusResponse)
async def update_task_status(
    task_id: str,
    update: StatusUpdate,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    """Leader override of a task status; runs the phase and roadmap cascade"""
    task, phase, roadmap = await roadmap_service.get_task_context(db, task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    await require_team_leader(roadmap.id, current_user, db)

    result = await workflow.set_task_status(db, task, phase, update.status)
    return TaskStatusResponse(message="Task status updated", task=TaskResponse.model_validate(task), **result)


@router.patch("/task/{task_id}/assign", response_model=TaskResponse)
async def assign_task(
    task_id: str,
    assignment: TaskAssign,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    """Assign a task to a team member, or unassign with null"""
    task, phase, roadmap = await roadmap_service.get_task_context(db, task_id)
    if not task:
        raise TaskNotFoundError(task_id)

    team = await require_team_leader(roadmap.id, current_user, db)
    if assignment.user_id and not team.has_member(assignment.user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is not a member of this team")

    task.assigned_to = assignment.user_id
    await db.flush()
    await db.refresh(task, attribute_names=["assignee"])

    logger.info(f"Task {task_id} assigned to {assignment.user_id or 'nobody'}")
    return task
