"""
Team API

A leader creates a team and shares its invite code; members join with the
code. Members are the users whose ``team_id`` points at the team.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from pathforge.core.config import settings
from pathforge.core.database import get_db
from pathforge.core.logging_config import logger
from pathforge.models.project_suggestion import ProjectSuggestion
from pathforge.models.team import Team, generate_invite_code
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import get_current_user, require_leader, require_member
from pathforge.schemas.auth import UserBrief
from pathforge.schemas.team import TeamCreate, TeamJoin, TeamResponse, InviteCodeResponse

router = APIRouter()


# ==================== Helper Functions ====================

async def get_team_or_404(team_id: str, db: AsyncSession) -> Team:
    result = await db.execute(
        select(Team)
        .where(Team.id == team_id)
        .execution_options(populate_existing=True)
    )
    team = result.scalar_one_or_none()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


async def unique_invite_code(db: AsyncSession) -> str:
    """Draw codes until one is not taken"""
    while True:
        code = generate_invite_code()
        result = await db.execute(select(Team.id).where(Team.invite_code == code))
        if not result.scalar_one_or_none():
            return code


def build_team_response(team: Team, viewer: User) -> TeamResponse:
    is_leader = str(team.leader_id) == str(viewer.id)
    return TeamResponse(
        id=team.id,
        name=team.name,
        invite_code=team.invite_code if is_leader else None,
        leader_id=team.leader_id,
        leader=UserBrief.model_validate(team.leader) if team.leader else None,
        project_title=team.project_title,
        selected_project_id=team.selected_project_id,
        build_mode=team.build_mode,
        roadmap_id=team.roadmap_id,
        max_members=team.max_members,
        member_count=len(team.members),
        members=[UserBrief.model_validate(m) for m in team.members],
        is_active=team.is_active,
        created_at=team.created_at,
    )


# ==================== Endpoints ====================

@router.post("/create", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_data: TeamCreate,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    """Create a team; the leader becomes its first member"""
    if current_user.team_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You already have a team")

    team = Team(
        name=team_data.name.strip(),
        invite_code=await unique_invite_code(db),
        leader_id=current_user.id,
        max_members=settings.MAX_TEAM_MEMBERS,
        is_active=True,
    )
    if current_user.selected_project_id:
        project = await db.get(ProjectSuggestion, current_user.selected_project_id)
        team.selected_project_id = current_user.selected_project_id
        team.project_title = project.title if project else None
    if current_user.build_mode:
        team.build_mode = current_user.build_mode

    db.add(team)
    await db.flush()

    current_user.team_id = team.id
    await db.flush()

    logger.info(f"Team created: {team.name} by {current_user.email}")
    return build_team_response(await get_team_or_404(team.id, db), current_user)


@router.post("/join", response_model=TeamResponse)
async def join_team(
    join_data: TeamJoin,
    current_user: User = Depends(require_member),
    db: AsyncSession = Depends(get_db)
):
    if current_user.team_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You are already in a team")

    result = await db.execute(
        select(Team).where(Team.invite_code == join_data.invite_code.strip().upper())
    )
    team = result.scalar_one_or_none()
    if not team or not team.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid or expired invite code")

    if len(team.members) >= team.max_members:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Team is full")

    current_user.team_id = team.id
    await db.flush()

    logger.info(f"User {current_user.email} joined team {team.name}")
    return build_team_response(await get_team_or_404(team.id, db), current_user)


@router.get("/my-team", response_model=TeamResponse)
async def get_my_team(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    if not current_user.team_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You are not part of any team")
    return build_team_response(await get_team_or_404(current_user.team_id, db), current_user)


@router.post("/leave")
async def leave_team(
    current_user: User = Depends(require_member),
    db: AsyncSession = Depends(get_db)
):
    if not current_user.team_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You are not part of any team")

    team_id = current_user.team_id
    current_user.team_id = None
    await db.flush()

    logger.info(f"User {current_user.email} left team {team_id}")
    return {"message": "Left team successfully"}


@router.post("/regenerate-code", response_model=InviteCodeResponse)
async def regenerate_invite_code(
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    if not current_user.team_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You are not part of any team")

    team = await get_team_or_404(current_user.team_id, db)
    if str(team.leader_id) != str(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the team leader can regenerate the invite code")

    team.invite_code = await unique_invite_code(db)
    await db.flush()

    logger.info(f"Invite code regenerated for team {team.id}")
    return InviteCodeResponse(message="Invite code regenerated", invite_code=team.invite_code)
