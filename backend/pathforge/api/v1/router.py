from fastapi import APIRouter
from pathforge.api.v1.endpoints import (
    auth, onboarding, team, roadmap, execution, error, documentation, viva, analytics,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(onboarding.router, prefix="/onboarding", tags=["Onboarding"])
api_router.include_router(team.router, prefix="/team", tags=["Team"])
api_router.include_router(roadmap.router, prefix="/roadmap", tags=["Roadmap"])
api_router.include_router(execution.router, prefix="/execution", tags=["Task Execution"])
api_router.include_router(error.router, prefix="/error", tags=["Error Logging"])
api_router.include_router(documentation.router, prefix="/documentation", tags=["Documentation"])
api_router.include_router(viva.router, prefix="/viva", tags=["Viva Preparation"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
