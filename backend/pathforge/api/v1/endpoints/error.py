"""
Error Logging API

Students paste an error or confusion; it is classified, explained in
learning terms and stored against the task.
"""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.config import settings
from pathforge.core.database import get_db
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import get_current_user
from pathforge.schemas.error import ErrorAnalyzeRequest, ErrorLogResponse, ConceptSummary
from pathforge.services.error_analysis import error_analysis_service

router = APIRouter()


@router.post("/analyze", response_model=ErrorLogResponse, status_code=status.HTTP_201_CREATED)
async def analyze_error(
    request: ErrorAnalyzeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    if not request.task_id or not request.error_input:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="task_id and error_input are required"
        )

    if len(request.error_input.strip()) < settings.ERROR_INPUT_MIN_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please describe the error in at least {settings.ERROR_INPUT_MIN_LENGTH} characters"
        )

    return await error_analysis_service.log_error(db, current_user.id, request.task_id, request.error_input)


@router.get("/task/{task_id}", response_model=List[ErrorLogResponse])
async def get_task_errors(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The current user's errors for a task, newest first"""
    return await error_analysis_service.get_task_errors(db, current_user.id, task_id)


@router.patch("/{error_id}/resolve", response_model=ErrorLogResponse)
async def resolve_error(
    error_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    error_log = await error_analysis_service.get_user_error(db, current_user.id, error_id)
    if not error_log:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Error log not found")

    if not error_log.resolved:
        error_log.resolved = True
        error_log.resolved_at = datetime.utcnow()
        await db.flush()
    return error_log


@router.get("/user/concepts", response_model=List[ConceptSummary])
async def get_user_concepts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await error_analysis_service.get_user_concepts(db, current_user.id)
