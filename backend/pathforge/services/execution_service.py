"""
Task Execution Service

Runs the assignee side of a task: start, view prompts, confirm
understanding, complete. Completion is gated on the learning steps: the
assignee must have viewed every required prompt for the roadmap's build
mode and confirmed understanding. Status changes go through the workflow
module so the phase cascade is the same one the leader endpoints use.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pathforge.core.exceptions import (
    AuthorizationError, RoadmapNotFoundError, TaskNotFoundError, ValidationError, WorkflowError,
)
from pathforge.core.logging_config import logger
from pathforge.models.roadmap import Phase, PhaseStatus, Roadmap, Task, TaskStatus
from pathforge.models.task_activity import (
    PromptHistory, PromptView, TaskExecution, UnderstandingConfirmation,
)
from pathforge.models.team import Team
from pathforge.models.user import User
from pathforge.services.prompt_generator import (
    get_custom_prompts_for_task_type, normalize_step, required_prompt_steps,
)
from pathforge.services.roadmap_service import get_task_context
from pathforge.services.workflow import set_task_status


def percent(part: int, whole: int) -> int:
    return int(math.floor(part / whole * 100 + 0.5)) if whole else 0


class TaskContext:
    """A task with its phase, roadmap and team"""

    def __init__(self, task: Task, phase: Phase, roadmap: Roadmap, team: Optional[Team]):
        self.task = task
        self.phase = phase
        self.roadmap = roadmap
        self.team = team

    def is_member(self, user: User) -> bool:
        return bool(self.team) and str(user.team_id) == str(self.team.id)

    def is_leader(self, user: User) -> bool:
        return bool(self.team) and str(self.team.leader_id) == str(user.id)


class ExecutionService:

    async def load(self, db: AsyncSession, task_id: str) -> TaskContext:
        task, phase, roadmap = await get_task_context(db, task_id)
        if not task:
            raise TaskNotFoundError(task_id)
        result = await db.execute(select(Team).where(Team.id == roadmap.team_id))
        return TaskContext(task, phase, roadmap, result.scalar_one_or_none())

    async def load_for_member(self, db: AsyncSession, task_id: str, user: User) -> TaskContext:
        ctx = await self.load(db, task_id)
        if not ctx.is_member(user):
            raise AuthorizationError("You are not a member of this team")
        return ctx

    async def load_for_leader(self, db: AsyncSession, task_id: str, user: User) -> TaskContext:
        ctx = await self.load(db, task_id)
        if not ctx.is_leader(user):
            raise AuthorizationError("Only the team leader can assign tasks")
        return ctx

    # ==================== Prompt gate ====================

    async def _viewed_steps(self, db: AsyncSession, task_id: str, user_id: str) -> List[float]:
        result = await db.execute(
            select(PromptView.prompt_step)
            .where(PromptView.task_id == task_id, PromptView.user_id == user_id)
            .order_by(PromptView.viewed_at)
        )
        return [float(step) for step in result.scalars().all()]

    async def _is_confirmed(self, db: AsyncSession, task_id: str, user_id: str) -> bool:
        result = await db.execute(
            select(UnderstandingConfirmation.id).where(
                UnderstandingConfirmation.task_id == task_id,
                UnderstandingConfirmation.user_id == user_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def prompt_status(self, db: AsyncSession, ctx: TaskContext, user: User) -> Dict[str, Any]:
        prompts = get_custom_prompts_for_task_type(ctx.task, ctx.roadmap.build_mode)
        required = set(required_prompt_steps(prompts))
        viewed = [s for s in await self._viewed_steps(db, ctx.task.id, user.id) if s in required]
        confirmed = await self._is_confirmed(db, ctx.task.id, user.id)

        return {
            "prompts": prompts,
            "total_required": len(required),
            "viewed_prompts": [normalize_step(s) for s in viewed],
            "understanding_confirmed": confirmed,
            "can_complete": len(viewed) >= len(required) and confirmed,
        }

    async def get_task_prompts(self, db: AsyncSession, task_id: str, user: User) -> Dict[str, Any]:
        ctx = await self.load_for_member(db, task_id, user)
        status = await self.prompt_status(db, ctx, user)

        history = await db.execute(
            select(PromptHistory)
            .where(PromptHistory.task_id == ctx.task.id, PromptHistory.user_id == user.id)
            .order_by(PromptHistory.viewed_at)
        )

        return {
            "prompts": status["prompts"],
            "build_mode": ctx.roadmap.build_mode,
            "prompt_status": {
                "total_required": status["total_required"],
                "viewed": len(status["viewed_prompts"]),
                "viewed_prompts": status["viewed_prompts"],
                "understanding_confirmed": status["understanding_confirmed"],
            },
            "can_complete": status["can_complete"],
            "prompt_history": [
                {
                    "prompt_text": h.prompt_text,
                    "prompt_type": h.prompt_type,
                    "viewed_at": h.viewed_at,
                    "copied_at": h.copied_at,
                }
                for h in history.scalars().all()
            ],
        }

    async def record_prompt_copy(self, db: AsyncSession, task_id: str, user: User, prompt_text: str,
                                 prompt_type: Optional[str] = None, prompt_step: Optional[float] = None) -> PromptHistory:
        ctx = await self.load_for_member(db, task_id, user)
        now = datetime.utcnow()

        result = await db.execute(
            select(PromptHistory).where(
                PromptHistory.task_id == ctx.task.id,
                PromptHistory.user_id == user.id,
                PromptHistory.prompt_text == prompt_text,
            )
        )
        entry = result.scalars().first()
        if entry:
            entry.copied_at = now
            entry.used = True
        else:
            entry = PromptHistory(
                task_id=ctx.task.id,
                user_id=user.id,
                prompt_text=prompt_text,
                prompt_type=prompt_type,
                prompt_step=prompt_step,
                viewed_at=now,
                copied_at=now,
                used=True,
            )
            db.add(entry)

        if prompt_text not in (ctx.task.prompts_viewed or []):
            ctx.task.prompts_viewed = [*(ctx.task.prompts_viewed or []), prompt_text]

        await db.flush()
        return entry

    async def record_prompt_view(self, db: AsyncSession, task_id: str, user: User, prompt_step: float) -> Dict[str, Any]:
        ctx = await self.load_for_member(db, task_id, user)
        prompts = get_custom_prompts_for_task_type(ctx.task, ctx.roadmap.build_mode)
        step = float(prompt_step)

        if step not in {float(p["step"]) for p in prompts}:
            raise ValidationError("Unknown prompt step", field="prompt_step")

        viewed = await self._viewed_steps(db, ctx.task.id, user.id)
        now = datetime.utcnow()
        if step not in viewed:
            db.add(PromptView(task_id=ctx.task.id, user_id=user.id, prompt_step=step, viewed_at=now))
            viewed.append(step)

        history = await db.execute(
            select(PromptHistory).where(
                PromptHistory.task_id == ctx.task.id,
                PromptHistory.user_id == user.id,
                PromptHistory.prompt_step == step,
            )
        )
        for entry in history.scalars().all():
            entry.scrolled_into_view = True
            entry.scrolled_at = now

        await db.flush()

        required = set(required_prompt_steps(prompts))
        return {
            "message": "Prompt view recorded",
            "viewed_count": sum(1 for s in viewed if s in required),
            "total_required": len(required),
        }

    async def confirm_understanding(self, db: AsyncSession, task_id: str, user: User) -> Dict[str, Any]:
        ctx = await self.load_for_member(db, task_id, user)

        result = await db.execute(
            select(UnderstandingConfirmation).where(
                UnderstandingConfirmation.task_id == ctx.task.id,
                UnderstandingConfirmation.user_id == user.id,
            )
        )
        confirmation = result.scalar_one_or_none()
        if not confirmation:
            confirmation = UnderstandingConfirmation(
                task_id=ctx.task.id, user_id=user.id, confirmed_at=datetime.utcnow()
            )
            db.add(confirmation)
            await db.flush()
            logger.info(f"Understanding confirmed for task {ctx.task.id} by user {user.id}")

        return {
            "message": "Understanding confirmed",
            "understanding_confirmed": True,
            "confirmed_at": confirmation.confirmed_at,
        }

    # ==================== Task lifecycle ====================

    async def _latest_execution(self, db: AsyncSession, task_id: str, user_id: str) -> Optional[TaskExecution]:
        result = await db.execute(
            select(TaskExecution)
            .where(TaskExecution.task_id == task_id, TaskExecution.user_id == user_id)
            .order_by(TaskExecution.started_at.desc())
        )
        return result.scalars().first()

    def _ensure_assignee(self, task: Task, user: User, action: str) -> None:
        if not task.assigned_to or str(task.assigned_to) != str(user.id):
            raise AuthorizationError(f"Only assigned team member can {action} this task")

    async def start_task(self, db: AsyncSession, task_id: str, user: User) -> Task:
        ctx = await self.load(db, task_id)
        self._ensure_assignee(ctx.task, user, "start")

        if ctx.task.status != TaskStatus.TODO:
            raise WorkflowError(f"Task is already {ctx.task.status.value.lower().replace('_', ' ')}")

        await set_task_status(db, ctx.task, ctx.phase, TaskStatus.IN_PROGRESS)
        db.add(TaskExecution(task_id=ctx.task.id, user_id=user.id, started_at=ctx.task.started_at))
        await db.flush()
        return ctx.task

    async def complete_task(self, db: AsyncSession, task_id: str, user: User,
                            notes: Optional[str] = None, actual_hours: Optional[float] = None) -> Dict[str, Any]:
        ctx = await self.load(db, task_id)
        self._ensure_assignee(ctx.task, user, "complete")

        if ctx.task.status != TaskStatus.IN_PROGRESS:
            raise WorkflowError("Task must be in progress to be completed")

        status = await self.prompt_status(db, ctx, user)
        viewed_count = len(status["viewed_prompts"])
        if viewed_count < status["total_required"]:
            raise WorkflowError(
                f"You must view all {status['total_required']} AI prompts before completing this task",
                details={"viewed_count": viewed_count, "required_count": status["total_required"]},
            )
        if not status["understanding_confirmed"]:
            raise WorkflowError(
                'Please confirm you understood this task before completing it. '
                'Click "I understood this task" in the prompt section.'
            )

        if actual_hours:
            ctx.task.actual_hours = actual_hours
        if notes:
            ctx.task.notes = notes

        result = await set_task_status(db, ctx.task, ctx.phase, TaskStatus.COMPLETED)

        execution = await self._latest_execution(db, ctx.task.id, user.id)
        if execution:
            execution.completed_at = ctx.task.completed_at
            execution.calculate_time_spent()
            if notes:
                execution.notes = notes
        await db.flush()

        return {"task": ctx.task, **result}

    async def report_error(self, db: AsyncSession, task_id: str, user: User,
                           error_description: Optional[str] = None) -> Task:
        ctx = await self.load_for_member(db, task_id, user)
        ctx.task.error_reported = True
        ctx.task.help_requested = True

        execution = await self._latest_execution(db, ctx.task.id, user.id)
        if execution:
            execution.error_reported = True
            execution.help_requested = True
            execution.error_description = error_description or ""

        await db.flush()
        logger.info(f"Help requested on task {ctx.task.id} by user {user.id}")
        return ctx.task

    # ==================== Assignment ====================

    async def assign_task(self, db: AsyncSession, task_id: str, leader: User, user_id: str) -> Task:
        ctx = await self.load_for_leader(db, task_id, leader)
        if ctx.task.assigned_to:
            raise ValidationError("Task is already assigned. Use reassign instead.")

        is_member = any(str(m.id) == str(user_id) for m in ctx.team.members)
        if not is_member and str(ctx.team.leader_id) != str(user_id):
            raise ValidationError("User is not a member of this team", field="user_id")

        ctx.task.assigned_to = str(user_id)
        await db.flush()
        await db.refresh(ctx.task, attribute_names=["assignee"])
        logger.info(f"Task {ctx.task.id} assigned to {user_id}")
        return ctx.task

    async def reassign_task(self, db: AsyncSession, task_id: str, leader: User, user_id: str) -> Task:
        ctx = await self.load_for_leader(db, task_id, leader)
        if not ctx.team.has_member(user_id):
            raise ValidationError("User is not a member of this team", field="user_id")

        ctx.task.assigned_to = str(user_id)
        await db.flush()
        await db.refresh(ctx.task, attribute_names=["assignee"])
        logger.info(f"Task {ctx.task.id} reassigned to {user_id}")
        return ctx.task

    # ==================== Roadmap views ====================

    async def get_active_phase(self, db: AsyncSession, roadmap_id: str) -> Dict[str, Any]:
        roadmap = await db.get(Roadmap, str(roadmap_id))
        if not roadmap:
            raise RoadmapNotFoundError(roadmap_id)

        result = await db.execute(
            select(Phase)
            .where(
                Phase.roadmap_id == roadmap.id,
                Phase.status.in_([PhaseStatus.ACTIVE, PhaseStatus.IN_PROGRESS]),
            )
            .order_by(Phase.order)
            .options(selectinload(Phase.tasks))
            .execution_options(populate_existing=True)
        )
        active = result.scalars().first()
        if active:
            return {"active_phase": active, "all_completed": False, "message": None}

        statuses = await db.execute(select(Phase.status).where(Phase.roadmap_id == roadmap.id))
        statuses = list(statuses.scalars().all())
        all_completed = bool(statuses) and all(s == PhaseStatus.COMPLETED for s in statuses)
        return {
            "active_phase": None,
            "all_completed": all_completed,
            "message": "All phases completed!" if all_completed else "No active phase found",
        }

    async def get_progress(self, db: AsyncSession, roadmap_id: str) -> Dict[str, Any]:
        roadmap = await db.get(Roadmap, str(roadmap_id))
        if not roadmap:
            raise RoadmapNotFoundError(roadmap_id)

        result = await db.execute(
            select(Phase).where(Phase.roadmap_id == roadmap.id).order_by(Phase.order)
        )
        phases = list(result.scalars().all())
        task_result = await db.execute(
            select(Task).where(Task.phase_id.in_([p.id for p in phases])).order_by(Task.order)
        )
        tasks = list(task_result.scalars().all())

        phase_progress = []
        for phase in phases:
            phase_tasks = [t for t in tasks if t.phase_id == phase.id]
            completed = sum(1 for t in phase_tasks if t.status == TaskStatus.COMPLETED)
            phase_progress.append({
                "phase_id": phase.id,
                "order": phase.order,
                "name": phase.name,
                "status": phase.status.value,
                "total_tasks": len(phase_tasks),
                "completed_tasks": completed,
                "progress": percent(completed, len(phase_tasks)),
            })

        contributions: Dict[str, Dict[str, Any]] = {}
        for task in tasks:
            if not task.assigned_to:
                continue
            entry = contributions.setdefault(task.assigned_to, {
                "user_id": task.assigned_to,
                "name": task.assignee.name if task.assignee else None,
                "assigned_tasks": 0,
                "completed_tasks": 0,
            })
            entry["assigned_tasks"] += 1
            if task.status == TaskStatus.COMPLETED:
                entry["completed_tasks"] += 1
        for entry in contributions.values():
            entry["completion_rate"] = percent(entry["completed_tasks"], entry["assigned_tasks"])

        completed_phases = sum(1 for p in phases if p.status == PhaseStatus.COMPLETED)
        return {
            "roadmap_id": roadmap.id,
            "overall_progress": percent(completed_phases, len(phases)),
            "phases": phase_progress,
            "team_contributions": sorted(
                contributions.values(), key=lambda c: c["completed_tasks"], reverse=True
            ),
        }


# Singleton instance
execution_service = ExecutionService()
