"""
Task Execution API

The assignee's working loop for a task: read the prompts for the build
mode, mark them viewed, confirm understanding, then complete.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.database import get_db
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import require_leader, require_team
from pathforge.schemas.execution import (
    TaskComplete, PromptCopy, PromptViewed, ErrorReport, TaskAssignUser,
    ActivePhaseResponse, TaskPromptsResponse, TaskActionResponse, TaskCompleteResponse,
)
from pathforge.schemas.roadmap import ProgressResponse, TaskResponse
from pathforge.services.execution_service import execution_service

router = APIRouter()


@router.get("/roadmap/{roadmap_id}/active-phase", response_model=ActivePhaseResponse)
async def get_active_phase(
    roadmap_id: str,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    return await execution_service.get_active_phase(db, roadmap_id)


@router.get("/task/{task_id}/prompts", response_model=TaskPromptsResponse)
async def get_task_prompts(
    task_id: str,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    return await execution_service.get_task_prompts(db, task_id, current_user)


@router.patch("/task/{task_id}/start", response_model=TaskActionResponse)
async def start_task(
    task_id: str,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    task = await execution_service.start_task(db, task_id, current_user)
    return TaskActionResponse(message="Task started successfully", task=TaskResponse.model_validate(task))


@router.patch("/task/{task_id}/complete", response_model=TaskCompleteResponse)
async def complete_task(
    task_id: str,
    completion: TaskComplete,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    """Complete a task once every required prompt is viewed and understanding confirmed"""
    result = await execution_service.complete_task(
        db, task_id, current_user, notes=completion.notes, actual_hours=completion.actual_hours
    )
    return TaskCompleteResponse(
        message="Task completed successfully",
        task=TaskResponse.model_validate(result["task"]),
        phase_completed=result["phase_completed"],
        next_phase_unlocked=result["next_phase_unlocked"],
    )


@router.post("/task/{task_id}/prompt-copy")
async def log_prompt_copy(
    task_id: str,
    copy: PromptCopy,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    await execution_service.record_prompt_copy(
        db, task_id, current_user, copy.prompt_text, copy.prompt_type, copy.prompt_step
    )
    return {"message": "Prompt usage logged"}


@router.post("/task/{task_id}/prompt-viewed")
async def mark_prompt_viewed(
    task_id: str,
    view: PromptViewed,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    return await execution_service.record_prompt_view(db, task_id, current_user, view.prompt_step)


@router.post("/task/{task_id}/confirm-understanding")
async def confirm_understanding(
    task_id: str,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    return await execution_service.confirm_understanding(db, task_id, current_user)


@router.post("/task/{task_id}/report-error")
async def report_error(
    task_id: str,
    report: ErrorReport,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    """Flag a task as needing help"""
    task = await execution_service.report_error(db, task_id, current_user, report.error_description)
    return {
        "message": "Error reported. Your team leader has been notified.",
        "task_id": task.id,
        "error_reported": task.error_reported,
        "help_requested": task.help_requested,
    }


@router.get("/roadmap/{roadmap_id}/progress", response_model=ProgressResponse)
async def get_roadmap_progress(
    roadmap_id: str,
    current_user: User = Depends(require_team),
    db: AsyncSession = Depends(get_db)
):
    return await execution_service.get_progress(db, roadmap_id)


@router.post("/task/{task_id}/assign", response_model=TaskActionResponse)
async def assign_task(
    task_id: str,
    assignment: TaskAssignUser,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    task = await execution_service.assign_task(db, task_id, current_user, assignment.user_id)
    return TaskActionResponse(message="Task assigned successfully", task=TaskResponse.model_validate(task))


@router.patch("/task/{task_id}/reassign", response_model=TaskActionResponse)
async def reassign_task(
    task_id: str,
    assignment: TaskAssignUser,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    task = await execution_service.reassign_task(db, task_id, current_user, assignment.user_id)
    return TaskActionResponse(message="Task reassigned successfully", task=TaskResponse.model_validate(task))
