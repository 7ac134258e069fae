"""
Roadmap generation and lookup.

A roadmap is built from the templates in ``roadmap_templates``: six phases
with per-mode durations, each holding the mode's task list. Phase 1 starts
ACTIVE and the rest LOCKED; the workflow module unlocks them in order.
"""
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pathforge.core.exceptions import TeamNotFoundError, ValidationError
from pathforge.core.logging_config import logger
from pathforge.models.roadmap import (
    BuildMode, Phase, PhaseStatus, Roadmap, RoadmapStatus, Task, TaskStatus,
)
from pathforge.models.team import Team
from pathforge.services.roadmap_templates import (
    PHASE_TEMPLATES, TASK_TEMPLATES, TIMELINES, total_days,
)


def parse_build_mode(value) -> BuildMode:
    try:
        return BuildMode(value)
    except ValueError:
        raise ValidationError(f"Invalid build mode: {value}", field="build_mode")


def _build_phases(build_mode: BuildMode, start: datetime) -> list:
    """Phase objects with chained start/due dates and their task lists"""
    timeline = TIMELINES[build_mode]
    phases = []
    cursor = start

    for index, template in enumerate(PHASE_TEMPLATES):
        days = timeline[template["name"]]
        due = cursor + timedelta(days=days)

        tasks = [
            Task(
                order=j + 1,
                title=t["title"],
                description=t["description"],
                difficulty=t["difficulty"],
                estimated_hours=t["hours"],
                learning_resources=list(t["resources"]),
                concept_checkpoint=t["checkpoint"],
                status=TaskStatus.TODO,
                prompts_viewed=[],
            )
            for j, t in enumerate(TASK_TEMPLATES[build_mode].get(template["name"], []))
        ]

        phases.append(Phase(
            order=index + 1,
            name=template["name"],
            description=template["description"],
            estimated_days=days,
            status=PhaseStatus.ACTIVE if index == 0 else PhaseStatus.LOCKED,
            start_date=cursor,
            due_date=due,
            tasks=tasks,
        ))
        cursor = due

    return phases


async def generate_roadmap(
    db: AsyncSession,
    team_id: str,
    project_id: Optional[str],
    build_mode,
) -> Roadmap:
    """
    Create the roadmap for a team.

    Idempotent: a team that already has a roadmap gets it back unchanged.

    Raises:
        ValidationError: unknown build mode
        TeamNotFoundError: no such team
    """
    mode = parse_build_mode(build_mode)

    existing = await db.execute(select(Roadmap).where(Roadmap.team_id == str(team_id)))
    roadmap = existing.scalar_one_or_none()
    if roadmap:
        logger.info(f"Roadmap already exists for team {team_id}")
        return await get_roadmap_with_details(db, roadmap.id)

    result = await db.execute(select(Team).where(Team.id == str(team_id)))
    team = result.scalar_one_or_none()
    if not team:
        raise TeamNotFoundError(team_id)

    roadmap = Roadmap(
        team_id=team.id,
        project_id=project_id,
        build_mode=mode,
        total_estimated_days=total_days(mode),
        status=RoadmapStatus.GENERATED,
        phases=_build_phases(mode, datetime.utcnow()),
    )
    db.add(roadmap)
    await db.flush()

    team.roadmap_id = roadmap.id
    await db.flush()

    logger.info(
        f"Roadmap generated for team {team_id} with {mode.value} mode",
        extra={"roadmap_id": roadmap.id, "build_mode": mode.value},
    )
    return await get_roadmap_with_details(db, roadmap.id)


async def get_roadmap_with_details(db: AsyncSession, roadmap_id: str) -> Optional[Roadmap]:
    """Roadmap with phases (by order), their tasks (by order) and assignees"""
    result = await db.execute(
        select(Roadmap)
        .where(Roadmap.id == str(roadmap_id))
        .options(selectinload(Roadmap.phases).selectinload(Phase.tasks))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_team_roadmap(db: AsyncSession, team_id: str) -> Optional[Roadmap]:
    result = await db.execute(select(Roadmap.id).where(Roadmap.team_id == str(team_id)))
    roadmap_id = result.scalar_one_or_none()
    if not roadmap_id:
        return None
    return await get_roadmap_with_details(db, roadmap_id)


async def get_task_context(db: AsyncSession, task_id: str):
    """(task, phase, roadmap) for a task id, or (None, None, None)"""
    result = await db.execute(
        select(Task, Phase, Roadmap)
        .join(Phase, Task.phase_id == Phase.id)
        .join(Roadmap, Phase.roadmap_id == Roadmap.id)
        .where(Task.id == str(task_id))
    )
    row = result.first()
    if not row:
        return None, None, None
    return row[0], row[1], row[2]
