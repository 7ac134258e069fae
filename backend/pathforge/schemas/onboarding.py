"""Pydantic schemas for student onboarding"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from pathforge.models.project_suggestion import ProjectDifficulty
from pathforge.models.roadmap import BuildMode
from pathforge.models.user import AcademicYear, ProjectField


class AcademicProfileUpdate(BaseModel):
    academic_year: AcademicYear
    project_field: ProjectField


class ProjectSelect(BaseModel):
    project_id: str = Field(..., min_length=1)


class BuildModeSelect(BaseModel):
    build_mode: BuildMode


class ProjectSuggestionResponse(BaseModel):
    id: str
    title: str
    domain: str
    problem_statement: str
    real_world_application: str
    interview_impact_score: int
    why_interviewers_like: List[str] = []
    difficulty: ProjectDifficulty
    recommended_years: List[str] = []
    tech_stack: List[str] = []

    model_config = ConfigDict(from_attributes=True)


class OnboardingStatusResponse(BaseModel):
    onboarding_completed: bool
    has_academic_profile: bool
    has_selected_project: bool
    academic_year: Optional[AcademicYear] = None
    project_field: Optional[ProjectField] = None
    build_mode: Optional[BuildMode] = None
    selected_project: Optional[ProjectSuggestionResponse] = None


class BuildModeResponse(BaseModel):
    message: str
    build_mode: BuildMode
    onboarding_completed: bool
    roadmap_generated: bool = False
    roadmap_id: Optional[str] = None
