"""
Viva Preparation API

Unlocked once enough phases are complete. Questions are generated per
user and category from the user's own tasks, errors and documentation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.database import get_db
from pathforge.core.rate_limiter import USER_LIMIT, limiter
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import get_current_user
from pathforge.schemas.viva import QuestionGenerate, ConfidenceUpdate
from pathforge.services.viva_service import viva_service, question_with_prep

router = APIRouter()


@router.get("/eligibility/{roadmap_id}")
async def get_eligibility(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await viva_service.check_eligibility(db, roadmap_id)


@router.get("/questions/{roadmap_id}")
async def get_questions(
    roadmap_id: str,
    category: Optional[str] = Query(None),
    confidence_level: Optional[str] = Query(None),
    marked_for_revision: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    questions = await viva_service.get_questions_by_category(
        db, roadmap_id, current_user, category,
        confidence_level=confidence_level, marked_for_revision=marked_for_revision,
    )
    return {"questions": questions, "total": len(questions)}


@router.post("/questions/generate", status_code=status.HTTP_201_CREATED)
@limiter.limit(USER_LIMIT)
async def generate_questions(
    request: Request,
    payload: QuestionGenerate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await viva_service.ensure_eligible(db, payload.roadmap_id)
    questions = await viva_service.generate_questions(
        db, payload.roadmap_id, current_user, payload.category, payload.count
    )
    return {
        "message": f"Generated {len(questions)} questions",
        "questions": [question_with_prep(q, None) for q in questions],
    }


@router.get("/question/{question_id}")
async def get_question(
    question_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await viva_service.get_question(db, question_id, current_user)


@router.put("/confidence/{question_id}")
@router.patch("/confidence/{question_id}")
async def update_confidence(
    question_id: str,
    update: ConfidenceUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    prep = await viva_service.update_confidence(
        db, current_user, question_id, update.confidence_level, update.notes or ""
    )
    return {
        "message": "Confidence level updated",
        "prep_data": {
            "question_id": prep.question_id,
            "confidence_level": prep.confidence_level.value,
            "practice_count": prep.practice_count,
            "last_practiced_at": prep.last_practiced_at,
            "marked_for_revision": prep.marked_for_revision,
            "notes": prep.notes,
        },
    }


@router.get("/revision-list/{roadmap_id}")
async def get_revision_list(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    questions = await viva_service.get_revision_list(db, roadmap_id, current_user)
    return {"questions": questions, "total": len(questions)}


@router.get("/stats/{roadmap_id}")
async def get_viva_stats(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await viva_service.get_statistics(db, roadmap_id, current_user)
