"""Pydantic schemas for student teams"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from pathforge.models.roadmap import BuildMode
from pathforge.schemas.auth import UserBrief


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255, description="Team name")


class TeamJoin(BaseModel):
    invite_code: str = Field(..., min_length=1, max_length=16)


class TeamResponse(BaseModel):
    id: str
    name: str
    # Only shown to the team leader
    invite_code: Optional[str] = None
    leader_id: str
    leader: Optional[UserBrief] = None
    project_title: Optional[str] = None
    selected_project_id: Optional[str] = None
    build_mode: Optional[BuildMode] = None
    roadmap_id: Optional[str] = None
    max_members: int
    member_count: int
    members: List[UserBrief] = []
    is_active: bool
    created_at: datetime


class InviteCodeResponse(BaseModel):
    message: str
    invite_code: str
