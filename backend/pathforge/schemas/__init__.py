# Pydantic schemas
from pathforge.schemas.auth import (
    UserRegister,
    UserLogin,
    UserBrief,
    UserResponse,
    TokenResponse,
)
from pathforge.schemas.team import TeamCreate, TeamJoin, TeamResponse, InviteCodeResponse
from pathforge.schemas.roadmap import (
    RoadmapGenerate,
    StatusUpdate,
    TaskAssign,
    TaskResponse,
    PhaseResponse,
    RoadmapResponse,
)

__all__ = [
    # Auth
    "UserRegister",
    "UserLogin",
    "UserBrief",
    "UserResponse",
    "TokenResponse",
    # Team
    "TeamCreate",
    "TeamJoin",
    "TeamResponse",
    "InviteCodeResponse",
    # Roadmap
    "RoadmapGenerate",
    "StatusUpdate",
    "TaskAssign",
    "TaskResponse",
    "PhaseResponse",
    "RoadmapResponse",
]
