"""Pydantic schemas for task execution and the prompt gate"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from pathforge.models.roadmap import BuildMode
from pathforge.schemas.roadmap import PhaseResponse, TaskResponse


class TaskComplete(BaseModel):
    notes: Optional[str] = None
    actual_hours: Optional[float] = Field(None, ge=0)


class PromptCopy(BaseModel):
    prompt_text: str = Field(..., min_length=1)
    prompt_type: Optional[str] = None
    prompt_step: Optional[float] = None


class PromptViewed(BaseModel):
    prompt_step: float


class ErrorReport(BaseModel):
    error_description: Optional[str] = None


class TaskAssignUser(BaseModel):
    user_id: str = Field(..., min_length=1)


class ActivePhaseResponse(BaseModel):
    active_phase: Optional[PhaseResponse] = None
    all_completed: bool
    message: Optional[str] = None


class PromptStatus(BaseModel):
    total_required: int
    viewed: int
    viewed_prompts: List[float]
    understanding_confirmed: bool


class PromptHistoryEntry(BaseModel):
    prompt_text: str
    prompt_type: Optional[str] = None
    viewed_at: datetime
    copied_at: Optional[datetime] = None


class TaskPromptsResponse(BaseModel):
    prompts: List[Dict[str, Any]]
    build_mode: BuildMode
    prompt_status: PromptStatus
    can_complete: bool
    prompt_history: List[PromptHistoryEntry]


class TaskActionResponse(BaseModel):
    message: str
    task: TaskResponse


class TaskCompleteResponse(TaskActionResponse):
    phase_completed: bool
    next_phase_unlocked: bool
