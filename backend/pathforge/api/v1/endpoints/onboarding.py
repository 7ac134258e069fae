"""
Student onboarding: academic profile -> project suggestion -> build mode.

Choosing the build mode completes onboarding. For a team leader with a
selected project it also fills in the team's project and generates the
team roadmap.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from pathforge.core.database import get_db
from pathforge.core.exceptions import PathForgeError, ProjectNotFoundError
from pathforge.core.logging_config import logger
from pathforge.models.project_suggestion import ProjectSuggestion
from pathforge.models.team import Team
from pathforge.models.user import User, UserRole
from pathforge.modules.auth.dependencies import get_current_user
from pathforge.schemas.onboarding import (
    AcademicProfileUpdate, ProjectSelect, BuildModeSelect,
    ProjectSuggestionResponse, OnboardingStatusResponse, BuildModeResponse,
)
from pathforge.schemas.auth import UserResponse
from pathforge.services.roadmap_service import generate_roadmap

router = APIRouter()


async def get_project_or_404(project_id: str, db: AsyncSession) -> ProjectSuggestion:
    result = await db.execute(select(ProjectSuggestion).where(ProjectSuggestion.id == project_id))
    project = result.scalar_one_or_none()
    if not project:
        raise ProjectNotFoundError(project_id)
    return project


@router.post("/profile", response_model=UserResponse)
async def save_academic_profile(
    profile: AcademicProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Save academic year and project field"""
    current_user.academic_year = profile.academic_year
    current_user.project_field = profile.project_field
    await db.flush()

    logger.info(f"Academic profile saved for user {current_user.id}: {profile.project_field.value}")
    return current_user


@router.get("/suggestions", response_model=List[ProjectSuggestionResponse])
async def get_project_suggestions(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Projects for the user's field and year, highest interview impact first"""
    if not current_user.academic_year or not current_user.project_field:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please complete academic profile first"
        )

    result = await db.execute(
        select(ProjectSuggestion)
        .where(ProjectSuggestion.domain == current_user.project_field.value)
        .order_by(ProjectSuggestion.interview_impact_score.desc())
    )
    year = current_user.academic_year.value
    return [p for p in result.scalars().all() if year in (p.recommended_years or [])]


@router.post("/select-project", response_model=UserResponse)
async def select_project(
    selection: ProjectSelect,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    project = await get_project_or_404(selection.project_id, db)

    current_user.selected_project_id = project.id
    await db.flush()

    logger.info(f"User {current_user.id} selected project {project.title}")
    return current_user


@router.get("/status", response_model=OnboardingStatusResponse)
async def get_onboarding_status(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    selected_project = None
    if current_user.selected_project_id:
        result = await db.execute(
            select(ProjectSuggestion).where(ProjectSuggestion.id == current_user.selected_project_id)
        )
        selected_project = result.scalar_one_or_none()

    return OnboardingStatusResponse(
        onboarding_completed=current_user.onboarding_completed,
        has_academic_profile=bool(current_user.academic_year and current_user.project_field),
        has_selected_project=bool(current_user.selected_project_id),
        academic_year=current_user.academic_year,
        project_field=current_user.project_field,
        build_mode=current_user.build_mode,
        selected_project=ProjectSuggestionResponse.model_validate(selected_project) if selected_project else None,
    )


@router.post("/build-mode", response_model=BuildModeResponse)
async def select_build_mode(
    selection: BuildModeSelect,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Set build mode, complete onboarding and generate the team roadmap for leaders"""
    current_user.build_mode = selection.build_mode
    current_user.onboarding_completed = True
    await db.flush()

    roadmap_id = None
    if current_user.role == UserRole.LEADER and current_user.team_id and current_user.selected_project_id:
        try:
            result = await db.execute(select(Team).where(Team.id == current_user.team_id))
            team = result.scalar_one_or_none()
            project = await db.get(ProjectSuggestion, current_user.selected_project_id)
            if team:
                team.selected_project_id = current_user.selected_project_id
                team.build_mode = selection.build_mode
                team.project_title = project.title if project else team.project_title
                await db.flush()

                roadmap = await generate_roadmap(
                    db, team.id, current_user.selected_project_id, selection.build_mode
                )
                roadmap_id = roadmap.id
        except PathForgeError as e:
            logger.log_error_with_context(e, context="roadmap generation during onboarding", user_id=str(current_user.id))

    return BuildModeResponse(
        message="Onboarding completed",
        build_mode=current_user.build_mode,
        onboarding_completed=True,
        roadmap_generated=roadmap_id is not None,
        roadmap_id=roadmap_id,
    )
