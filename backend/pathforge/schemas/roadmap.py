"""Pydantic schemas for roadmaps, phases and tasks"""
from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import datetime

from pathforge.models.roadmap import BuildMode, PhaseStatus, RoadmapStatus, TaskDifficulty, TaskStatus
from pathforge.schemas.auth import UserBrief


class RoadmapGenerate(BaseModel):
    # Optional so a missing field is reported as a 400 by the endpoint
    team_id: Optional[str] = None
    project_id: Optional[str] = None
    build_mode: Optional[str] = None


class StatusUpdate(BaseModel):
    status: str


class TaskAssign(BaseModel):
    user_id: Optional[str] = None


class TaskResponse(BaseModel):
    id: str
    phase_id: str
    order: int
    title: str
    description: str
    assigned_to: Optional[str] = None
    assignee: Optional[UserBrief] = None
    difficulty: TaskDifficulty
    estimated_hours: float
    status: TaskStatus
    learning_resources: List[Any] = []
    concept_checkpoint: bool
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    actual_hours: Optional[float] = 0
    notes: Optional[str] = ""
    error_reported: bool = False
    help_requested: bool = False

    model_config = ConfigDict(from_attributes=True)


class PhaseResponse(BaseModel):
    id: str
    roadmap_id: str
    order: int
    name: str
    description: str
    estimated_days: int
    status: PhaseStatus
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    tasks: List[TaskResponse] = []

    model_config = ConfigDict(from_attributes=True)


class RoadmapResponse(BaseModel):
    id: str
    team_id: str
    project_id: Optional[str] = None
    build_mode: BuildMode
    total_estimated_days: int
    status: RoadmapStatus
    created_at: datetime
    phases: List[PhaseResponse] = []

    model_config = ConfigDict(from_attributes=True)


class WorkflowResult(BaseModel):
    phase_status: str
    phase_completed: bool
    next_phase_unlocked: bool
    next_phase_id: Optional[str] = None
    roadmap_status: Optional[str] = None


class PhaseStatusResponse(WorkflowResult):
    message: str


class TaskStatusResponse(WorkflowResult):
    message: str
    task: TaskResponse


class ProgressResponse(BaseModel):
    roadmap_id: str
    overall_progress: int
    phases: List[Dict[str, Any]]
    team_contributions: List[Dict[str, Any]]
