from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime

from pathforge.models.roadmap import BuildMode
from pathforge.models.user import AcademicYear, ProjectField, UserRole


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserBrief(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    is_active: bool
    team_id: Optional[str] = None
    academic_year: Optional[AcademicYear] = None
    project_field: Optional[ProjectField] = None
    selected_project_id: Optional[str] = None
    build_mode: Optional[BuildMode] = None
    onboarding_completed: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
