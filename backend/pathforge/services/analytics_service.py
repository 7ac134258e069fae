"""
Analytics Service - learning analytics computed from tracked data only.

Everything is derived on request from a roadmap's tasks, prompt views,
understanding confirmations and error logs; nothing is estimated.
"""

import math
from collections import Counter, defaultdict
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.exceptions import RoadmapNotFoundError
from pathforge.models.error_log import ErrorLog
from pathforge.models.roadmap import Phase, Roadmap, Task, TaskStatus
from pathforge.models.task_activity import PromptView, UnderstandingConfirmation
from pathforge.models.team import Team
from pathforge.models.user import User
from pathforge.services.error_analysis import concept_label

PROMPTS_PER_TASK = 4
TREND_THRESHOLD = 0.15

QUALITY_WEIGHTS = {
    "adherence": 0.30,
    "error_conversion": 0.25,
    "engagement": 0.25,
    "improvement": 0.20,
}

IMPROVEMENT_POINTS = {
    "IMPROVING": 100,
    "STABLE": 70,
    "DECLINING": 40,
    "INSUFFICIENT_DATA": 50,
}


def improvement_trend(errors: List[ErrorLog]) -> str:
    """Compare resolved rates of the older and newer half of the errors"""
    if len(errors) < 3:
        return "INSUFFICIENT_DATA"

    ordered = sorted(errors, key=lambda e: e.created_at)
    midpoint = len(ordered) // 2
    first, second = ordered[:midpoint], ordered[midpoint:]
    first_rate = sum(1 for e in first if e.resolved) / len(first)
    second_rate = sum(1 for e in second if e.resolved) / len(second)

    if second_rate > first_rate + TREND_THRESHOLD:
        return "IMPROVING"
    if second_rate < first_rate - TREND_THRESHOLD:
        return "DECLINING"
    return "STABLE"


def participation_level(completed: int) -> str:
    if completed >= 5:
        return "HIGH"
    if completed >= 2:
        return "MEDIUM"
    return "LOW"


def learning_quality_score(adherence: float, error_conversion: float, engagement: float, trend: str) -> float:
    score = (
        adherence * 100 * QUALITY_WEIGHTS["adherence"]
        + error_conversion * 100 * QUALITY_WEIGHTS["error_conversion"]
        + engagement * 100 * QUALITY_WEIGHTS["engagement"]
        + IMPROVEMENT_POINTS[trend] * QUALITY_WEIGHTS["improvement"]
    )
    return round(score, 2)


def distribution_fairness(counts: List[int]) -> float:
    """100 for a perfectly even split, lower as the spread grows"""
    if not counts:
        return 0.0
    mean = sum(counts) / len(counts)
    if mean == 0:
        return 0.0
    stddev = math.sqrt(sum((c - mean) ** 2 for c in counts) / len(counts))
    return round(max(0.0, 100 - stddev / mean * 100), 2)


class _RoadmapData:
    """All rows for one roadmap, loaded once and sliced per user"""

    def __init__(self, roadmap, team, phases, tasks, views, confirmations, errors):
        self.roadmap = roadmap
        self.team = team
        self.phases = phases
        self.tasks = tasks
        self.views = views
        self.confirmations = confirmations
        self.errors = errors

    @property
    def team_completed(self) -> int:
        return sum(1 for t in self.tasks if t.status == TaskStatus.COMPLETED)


class AnalyticsService:

    async def _load(self, db: AsyncSession, roadmap_id: str) -> _RoadmapData:
        result = await db.execute(select(Roadmap).where(Roadmap.id == str(roadmap_id)))
        roadmap = result.scalar_one_or_none()
        if not roadmap:
            raise RoadmapNotFoundError(roadmap_id)

        team = (await db.execute(select(Team).where(Team.id == roadmap.team_id))).scalar_one_or_none()
        phases = list((await db.execute(
            select(Phase).where(Phase.roadmap_id == roadmap.id).order_by(Phase.order)
        )).scalars().all())
        tasks = list((await db.execute(
            select(Task).where(Task.phase_id.in_([p.id for p in phases]))
        )).scalars().all()) if phases else []

        task_ids = [t.id for t in tasks]
        views, confirmations, errors = [], [], []
        if task_ids:
            views = list((await db.execute(
                select(PromptView).where(PromptView.task_id.in_(task_ids))
            )).scalars().all())
            confirmations = list((await db.execute(
                select(UnderstandingConfirmation).where(UnderstandingConfirmation.task_id.in_(task_ids))
            )).scalars().all())
            errors = list((await db.execute(
                select(ErrorLog).where(ErrorLog.task_id.in_(task_ids))
            )).scalars().all())

        return _RoadmapData(roadmap, team, phases, tasks, views, confirmations, errors)

    def _user_metrics(self, data: _RoadmapData, user: User) -> Dict[str, Any]:
        user_id = str(user.id)
        assigned = [t for t in data.tasks if str(t.assigned_to) == user_id]
        completed = [t for t in assigned if t.status == TaskStatus.COMPLETED]
        started = [t for t in assigned if t.status != TaskStatus.TODO]
        views = [v for v in data.views if str(v.user_id) == user_id]
        confirmed_tasks = {str(c.task_id) for c in data.confirmations if str(c.user_id) == user_id}
        errors = [e for e in data.errors if str(e.user_id) == user_id]
        resolved = [e for e in errors if e.resolved]

        # Engagement
        unique_viewed = len({(str(v.task_id), v.prompt_step) for v in views})
        required = len(assigned) * PROMPTS_PER_TASK
        engagement = min(unique_viewed / required, 1.0) if required else 0.0

        # Quality inputs
        adherence = (
            sum(1 for t in started if str(t.id) in confirmed_tasks) / len(started) if started else 0.0
        )
        error_conversion = len(resolved) / len(errors) if errors else 0.0
        trend = improvement_trend(errors)

        concept_counts = Counter(concept_label(e.concept_involved) for e in errors if e.concept_involved)
        repetition = [
            {
                "concept": concept,
                "error_count": count,
                "resolved": all(e.resolved for e in errors if concept_label(e.concept_involved) == concept),
            }
            for concept, count in concept_counts.items()
            if count > 1
        ]
        concepts_mastered = sorted({concept_label(e.concept_involved) for e in resolved if e.concept_involved})

        phase_participation = []
        for phase in data.phases:
            count = sum(1 for t in completed if t.phase_id == phase.id)
            phase_participation.append({
                "phase_id": phase.id,
                "phase_name": phase.name,
                "task_count": count,
                "participation_level": participation_level(count),
            })

        timeline: Dict[str, Dict[str, int]] = defaultdict(lambda: {"tasks_completed": 0, "prompts_viewed": 0, "errors_encountered": 0})
        for task in completed:
            if task.completed_at:
                timeline[task.completed_at.date().isoformat()]["tasks_completed"] += 1
        for view in views:
            timeline[view.viewed_at.date().isoformat()]["prompts_viewed"] += 1
        for error in errors:
            timeline[error.created_at.date().isoformat()]["errors_encountered"] += 1

        team_completed = data.team_completed
        contribution = len(completed) / team_completed * 100 if team_completed else 0.0

        return {
            "user_id": user.id,
            "name": user.name,
            "role": user.role.value,
            "roadmap_id": data.roadmap.id,
            "tasks_assigned": len(assigned),
            "total_tasks_completed": len(completed),
            "prompt_engagement": {
                "score": round(engagement, 4),
                "viewed": unique_viewed,
                "required": required,
            },
            "error_recovery_count": len(resolved),
            "total_errors": len(errors),
            "concepts_mastered": concepts_mastered,
            "concept_repetition": repetition,
            "prompt_adherence_rate": round(adherence, 4),
            "error_to_understanding_rate": round(error_conversion, 4),
            "improvement_trend": trend,
            "learning_quality_score": learning_quality_score(adherence, error_conversion, engagement, trend),
            "contribution_percentage": round(contribution, 2),
            "phase_participation": phase_participation,
            "learning_timeline": [{"date": day, **counts} for day, counts in sorted(timeline.items())],
        }

    async def get_user_analytics(self, db: AsyncSession, roadmap_id: str, user: User) -> Dict[str, Any]:
        data = await self._load(db, roadmap_id)
        return self._user_metrics(data, user)

    async def get_team_analytics(self, db: AsyncSession, roadmap_id: str) -> Dict[str, Any]:
        data = await self._load(db, roadmap_id)
        members = list(data.team.members) if data.team else []

        individual = sorted(
            (self._user_metrics(data, member) for member in members),
            key=lambda m: m["contribution_percentage"],
            reverse=True,
        )
        counts = [m["total_tasks_completed"] for m in individual]

        def average(key: str) -> float:
            return round(sum(m[key] for m in individual) / len(individual), 2) if individual else 0.0

        return {
            "roadmap_id": data.roadmap.id,
            "team_id": data.team.id if data.team else None,
            "members": individual,
            "task_distribution": [
                {"user_id": m["user_id"], "name": m["name"], "role": m["role"], "task_count": m["total_tasks_completed"]}
                for m in individual
            ],
            "fairness_score": distribution_fairness(counts),
            "team_summary": {
                "total_members": len(individual),
                "avg_learning_quality_score": average("learning_quality_score"),
                "avg_contribution_percentage": average("contribution_percentage"),
                "total_tasks_completed": data.team_completed,
                "total_errors": len(data.errors),
                "resolved_errors": sum(1 for e in data.errors if e.resolved),
                "total_concepts": len({c for m in individual for c in m["concepts_mastered"]}),
            },
        }


# Singleton instance
analytics_service = AnalyticsService()
