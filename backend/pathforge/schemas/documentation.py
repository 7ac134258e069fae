"""Pydantic schemas for generated documentation"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
from datetime import datetime

from pathforge.models.roadmap import BuildMode


class DocumentationGenerate(BaseModel):
    roadmap_id: Optional[str] = None


class SectionEdit(BaseModel):
    section: str
    edited_text: str = Field(..., min_length=1)


class DocumentationResponse(BaseModel):
    id: str
    roadmap_id: str
    team_id: str
    project_id: Optional[str] = None
    build_mode: BuildMode
    content: Dict[str, Any]
    user_edits: Dict[str, Any]
    phases_completed: int
    total_phases: int
    can_generate: bool
    is_complete: bool
    generated_at: datetime
    last_regenerated_at: Optional[datetime] = None
    generation_version: int

    model_config = ConfigDict(from_attributes=True)
