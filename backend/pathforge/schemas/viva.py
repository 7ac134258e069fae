"""Pydantic schemas for viva preparation"""
from pydantic import BaseModel, Field
from typing import Optional


class QuestionGenerate(BaseModel):
    roadmap_id: str = Field(..., min_length=1)
    category: str
    count: int = Field(default=5, ge=1, le=20)


class ConfidenceUpdate(BaseModel):
    confidence_level: str
    notes: Optional[str] = None
