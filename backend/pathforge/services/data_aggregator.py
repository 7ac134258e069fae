"""
Data Aggregator

Collects everything recorded against a roadmap (phases, tasks, prompt
usage, error logs) into one plain dict. Documentation and viva generation
only ever read from this snapshot, so their text is grounded in what the
team actually did.
"""

from collections import Counter
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.exceptions import RoadmapNotFoundError
from pathforge.models.error_log import ErrorLog
from pathforge.models.project_suggestion import ProjectSuggestion
from pathforge.models.roadmap import Phase, PhaseStatus, Roadmap, Task, TaskStatus
from pathforge.models.task_activity import PromptHistory
from pathforge.models.team import Team
from pathforge.services.error_analysis import concept_label


def _project_summary(project: Optional[ProjectSuggestion], team: Optional[Team]) -> Dict[str, Any]:
    if project:
        return {
            "id": project.id,
            "title": project.title,
            "domain": project.domain,
            "problem_statement": project.problem_statement,
            "real_world_application": project.real_world_application,
            "tech_stack": list(project.tech_stack or []),
        }
    return {
        "id": None,
        "title": (team.project_title if team else None) or "Untitled Project",
        "domain": "software",
        "problem_statement": "",
        "real_world_application": "",
        "tech_stack": [],
    }


def _task_summary(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "order": task.order,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "difficulty": task.difficulty.value,
        "notes": task.notes or "",
        "assigned_to": task.assigned_to,
        "completed_at": task.completed_at,
    }


def build_error_stats(errors: List[ErrorLog]) -> Dict[str, Any]:
    """Totals, counts by type and the five most frequent concepts"""
    concepts: Dict[str, Dict[str, Any]] = {}
    for error in errors:
        label = concept_label(error.concept_involved) if error.concept_involved else "General"
        entry = concepts.setdefault(label, {"concept": label, "count": 0, "resolved": 0, "examples": []})
        entry["count"] += 1
        if error.resolved:
            entry["resolved"] += 1
        if len(entry["examples"]) < 2:
            entry["examples"].append(error.error_input[:100])

    top_concepts = sorted(concepts.values(), key=lambda c: c["count"], reverse=True)[:5]
    resolved = sum(1 for e in errors if e.resolved)

    return {
        "total": len(errors),
        "resolved": resolved,
        "unresolved": len(errors) - resolved,
        "top_concepts": top_concepts,
        "by_type": dict(Counter(e.error_type.value for e in errors)),
    }


def build_prompt_stats(history: List[PromptHistory]) -> Dict[str, Any]:
    return {
        "total_viewed": len(history),
        "unique_users": len({str(h.user_id) for h in history}),
        "by_type": dict(Counter(h.prompt_type or "UNKNOWN" for h in history)),
    }


async def aggregate_project_data(db: AsyncSession, roadmap_id: str) -> Dict[str, Any]:
    result = await db.execute(select(Roadmap).where(Roadmap.id == str(roadmap_id)))
    roadmap = result.scalar_one_or_none()
    if not roadmap:
        raise RoadmapNotFoundError(roadmap_id)

    team_result = await db.execute(select(Team).where(Team.id == roadmap.team_id))
    team = team_result.scalar_one_or_none()

    project = None
    if roadmap.project_id:
        project_result = await db.execute(
            select(ProjectSuggestion).where(ProjectSuggestion.id == roadmap.project_id)
        )
        project = project_result.scalar_one_or_none()

    phase_result = await db.execute(
        select(Phase).where(Phase.roadmap_id == roadmap.id).order_by(Phase.order)
    )
    phases = list(phase_result.scalars().all())
    phase_ids = [p.id for p in phases]

    tasks: List[Task] = []
    if phase_ids:
        task_result = await db.execute(
            select(Task).where(Task.phase_id.in_(phase_ids)).order_by(Task.order)
        )
        tasks = list(task_result.scalars().all())
    task_ids = [t.id for t in tasks]

    history: List[PromptHistory] = []
    errors: List[ErrorLog] = []
    if task_ids:
        history_result = await db.execute(select(PromptHistory).where(PromptHistory.task_id.in_(task_ids)))
        history = list(history_result.scalars().all())
        error_result = await db.execute(select(ErrorLog).where(ErrorLog.task_id.in_(task_ids)))
        errors = list(error_result.scalars().all())

    phase_data = []
    for phase in phases:
        phase_tasks = [_task_summary(t) for t in tasks if t.phase_id == phase.id]
        completed = [t for t in phase_tasks if t["status"] == TaskStatus.COMPLETED.value]
        phase_data.append({
            "id": phase.id,
            "order": phase.order,
            "name": phase.name,
            "description": phase.description,
            "status": phase.status.value,
            "tasks": phase_tasks,
            "completed_tasks": completed,
            "total_tasks": len(phase_tasks),
        })

    completed_phases = sum(1 for p in phases if p.status == PhaseStatus.COMPLETED)
    total_phases = len(phases)

    return {
        "project": _project_summary(project, team),
        "roadmap": {
            "id": roadmap.id,
            "build_mode": roadmap.build_mode,
            "total_estimated_days": roadmap.total_estimated_days,
            "status": roadmap.status.value,
        },
        "team": {
            "id": team.id if team else roadmap.team_id,
            "name": team.name if team else "",
            "member_count": len(team.members) if team else 0,
        },
        "phases": phase_data,
        "completed_phases": completed_phases,
        "total_phases": total_phases,
        "can_generate": completed_phases >= 1,
        "is_complete": total_phases > 0 and completed_phases == total_phases,
        "tasks": {
            "total": len(tasks),
            "completed": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            "in_progress": sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
        },
        "prompt_stats": build_prompt_stats(history),
        "error_stats": build_error_stats(errors),
    }


def find_phase(project_data: Dict[str, Any], *keywords: str) -> Optional[Dict[str, Any]]:
    """First phase whose name contains any keyword, tried in keyword order"""
    for keyword in keywords:
        for phase in project_data["phases"]:
            if keyword.lower() in phase["name"].lower():
                return phase
    return None


def completed_tasks_summary(project_data: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {
            "phase": phase["name"],
            "title": task["title"],
            "description": task["description"],
            "notes": task["notes"],
            "difficulty": task["difficulty"],
        }
        for phase in project_data["phases"]
        for task in phase["completed_tasks"]
    ]


def format_data_for_ai(project_data: Dict[str, Any], section: str) -> Dict[str, Any]:
    """Project header plus only the slice of data a section is allowed to draw on"""
    formatted: Dict[str, Any] = {
        "project_title": project_data["project"]["title"],
        "project_domain": project_data["project"]["domain"],
        "problem_statement": project_data["project"]["problem_statement"],
        "build_mode": project_data["roadmap"]["build_mode"].value,
        "phases_completed": project_data["completed_phases"],
        "total_phases": project_data["total_phases"],
    }

    def brief(phase):
        if not phase:
            return None
        return {
            "name": phase["name"],
            "status": phase["status"],
            "completed_tasks": [{"title": t["title"], "description": t["description"]} for t in phase["completed_tasks"]],
        }

    if section == "abstract":
        formatted["early_phases"] = [brief(p) for p in project_data["phases"][:2]]
    elif section == "problem_statement":
        formatted["problem_phase"] = brief(find_phase(project_data, "problem", "understanding"))
    elif section == "methodology":
        formatted["all_phases"] = [
            {
                "name": p["name"],
                "order": p["order"],
                "status": p["status"],
                "task_count": p["total_tasks"],
                "completed_count": len(p["completed_tasks"]),
            }
            for p in project_data["phases"]
        ]
    elif section == "architecture":
        formatted["design_phase"] = brief(find_phase(project_data, "design", "architecture"))
    elif section == "implementation":
        formatted["dev_phase"] = brief(find_phase(project_data, "development", "implementation"))
        formatted["completed_tasks"] = completed_tasks_summary(project_data)
        formatted["tech_stack"] = project_data["project"]["tech_stack"]
    elif section == "error_learning":
        formatted["error_stats"] = project_data["error_stats"]
    elif section == "results":
        formatted["completed_tasks"] = completed_tasks_summary(project_data)
        formatted["prompt_stats"] = project_data["prompt_stats"]
    elif section == "conclusion":
        formatted["learning_outcomes"] = {
            "tasks_completed": project_data["tasks"]["completed"],
            "concepts_mastered": len(project_data["error_stats"]["top_concepts"]),
            "phases": [p["name"] for p in project_data["phases"]],
        }

    return formatted
