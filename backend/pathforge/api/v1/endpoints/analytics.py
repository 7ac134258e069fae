"""Learning analytics for a roadmap, computed from tracked activity only"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from pathforge.core.database import get_db
from pathforge.core.exceptions import RoadmapNotFoundError
from pathforge.models.roadmap import Roadmap
from pathforge.models.team import Team
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import get_current_user, require_leader
from pathforge.services.analytics_service import analytics_service

router = APIRouter()


async def get_roadmap_team(roadmap_id: str, db: AsyncSession) -> Team:
    result = await db.execute(
        select(Team).join(Roadmap, Roadmap.team_id == Team.id).where(Roadmap.id == roadmap_id)
    )
    team = result.scalar_one_or_none()
    if not team:
        raise RoadmapNotFoundError(roadmap_id)
    return team


@router.get("/roadmap/{roadmap_id}/me")
async def get_my_analytics(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await analytics_service.get_user_analytics(db, roadmap_id, current_user)


@router.get("/roadmap/{roadmap_id}/team")
async def get_team_analytics(
    roadmap_id: str,
    current_user: User = Depends(require_leader),
    db: AsyncSession = Depends(get_db)
):
    team = await get_roadmap_team(roadmap_id, db)
    if str(team.leader_id) != str(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the team leader can view team analytics")
    return await analytics_service.get_team_analytics(db, roadmap_id)


@router.get("/roadmap/{roadmap_id}/user/{user_id}")
async def get_user_analytics(
    roadmap_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """A member's analytics; visible to the team leader and to the member themselves"""
    team = await get_roadmap_team(roadmap_id, db)
    if str(user_id) != str(current_user.id) and str(team.leader_id) != str(current_user.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view these analytics")

    user = next((m for m in team.members if str(m.id) == str(user_id)), None)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found in this team")
    return await analytics_service.get_user_analytics(db, roadmap_id, user)
