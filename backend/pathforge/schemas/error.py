"""Pydantic schemas for error logging"""
from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Optional
from datetime import datetime

from pathforge.models.error_log import ErrorType
from pathforge.models.roadmap import BuildMode


class ErrorAnalyzeRequest(BaseModel):
    # Optional so missing fields produce the endpoint's own 400
    task_id: Optional[str] = None
    error_input: Optional[str] = None


class ErrorLogResponse(BaseModel):
    id: str
    task_id: str
    user_id: str
    phase_id: Optional[str] = None
    project_title: Optional[str] = None
    build_mode: BuildMode
    error_input: str
    error_type: ErrorType
    analysis: Dict[str, Any]
    resolved: bool
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConceptSummary(BaseModel):
    concept: str
    count: int
    resolved_count: int
    unresolved_count: int
    last_occurrence: Optional[datetime] = None
