"""Viva / interview preparation questions and per-user practice state"""
from sqlalchemy import Column, DateTime, Enum as SQLEnum, Integer, Text, ForeignKey, JSON, Boolean, Index
from datetime import datetime
import enum

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid
from pathforge.models.roadmap import BuildMode
from pathforge.models.user import UserRole


class VivaCategory(str, enum.Enum):
    PROJECT_OVERVIEW = "PROJECT_OVERVIEW"
    CONCEPTUAL = "CONCEPTUAL"
    IMPLEMENTATION = "IMPLEMENTATION"
    ERROR_DEBUGGING = "ERROR_DEBUGGING"
    ROLE_SPECIFIC = "ROLE_SPECIFIC"
    FUTURE_SCOPE = "FUTURE_SCOPE"


class QuestionDifficulty(str, enum.Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class ConfidenceLevel(str, enum.Enum):
    CONFIDENT = "CONFIDENT"
    NEEDS_REVISION = "NEEDS_REVISION"
    NOT_ATTEMPTED = "NOT_ATTEMPTED"


class VivaQuestion(Base):
    __tablename__ = "viva_questions"

    __table_args__ = (
        Index('ix_viva_questions_roadmap_user_category', 'roadmap_id', 'user_id', 'category'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    roadmap_id = Column(GUID, ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category = Column(SQLEnum(VivaCategory), nullable=False)
    question = Column(Text, nullable=False)
    # {simple_answer, key_points[], interviewer_checking, common_mistake}
    answer = Column(JSON, nullable=False, default=dict)
    # {task_ids[], error_ids[], phase_ids[], document_sections[]}
    source_data = Column(JSON, nullable=False, default=dict)
    difficulty = Column(SQLEnum(QuestionDifficulty), default=QuestionDifficulty.INTERMEDIATE, nullable=False)
    build_mode = Column(SQLEnum(BuildMode), nullable=False)
    user_role = Column(SQLEnum(UserRole), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class VivaPrep(Base):
    __tablename__ = "viva_prep"

    __table_args__ = (
        Index('ix_viva_prep_user_question', 'user_id', 'question_id', unique=True),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(GUID, ForeignKey("viva_questions.id", ondelete="CASCADE"), nullable=False)
    confidence_level = Column(SQLEnum(ConfidenceLevel), default=ConfidenceLevel.NOT_ATTEMPTED, nullable=False)
    last_practiced_at = Column(DateTime, nullable=True)
    practice_count = Column(Integer, default=0, nullable=False)
    marked_for_revision = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, default="")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
