"""Catalogue of project ideas shown during onboarding"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Text, JSON, Index
from datetime import datetime
import enum

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid


class ProjectDifficulty(str, enum.Enum):
    BEGINNER_FRIENDLY = "Beginner-friendly"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class ProjectSuggestion(Base):
    __tablename__ = "project_suggestions"

    __table_args__ = (
        Index('ix_project_suggestions_domain', 'domain'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    domain = Column(String(100), nullable=False)
    problem_statement = Column(Text, nullable=False)
    real_world_application = Column(Text, nullable=False)
    interview_impact_score = Column(Integer, nullable=False)
    why_interviewers_like = Column(JSON, default=list)
    difficulty = Column(SQLEnum(ProjectDifficulty, values_callable=lambda e: [m.value for m in e]), nullable=False)
    recommended_years = Column(JSON, default=list)
    tech_stack = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ProjectSuggestion {self.title}>"
