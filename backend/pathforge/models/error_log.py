"""Self-reported errors with their learning-oriented analysis"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey, JSON, Boolean, Index
from datetime import datetime
import enum

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid
from pathforge.models.roadmap import BuildMode


class ErrorType(str, enum.Enum):
    SYNTAX = "SYNTAX"
    RUNTIME = "RUNTIME"
    LOGICAL = "LOGICAL"
    CONCEPTUAL = "CONCEPTUAL"
    CONFUSION = "CONFUSION"


class ErrorLog(Base):
    __tablename__ = "error_logs"

    __table_args__ = (
        Index('ix_error_logs_task_user', 'task_id', 'user_id'),
        Index('ix_error_logs_user_created', 'user_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    phase_id = Column(GUID, ForeignKey("phases.id", ondelete="SET NULL"), nullable=True)
    project_title = Column(String(255), nullable=True)
    build_mode = Column(SQLEnum(BuildMode), nullable=False)

    error_input = Column(Text, nullable=False)
    error_type = Column(SQLEnum(ErrorType), nullable=False)
    # {what_went_wrong, why_it_happened, concept_involved, improved_prompt, next_steps[]}
    analysis = Column(JSON, nullable=False, default=dict)

    resolved = Column(Boolean, default=False, nullable=False)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def concept_involved(self) -> str:
        return (self.analysis or {}).get("concept_involved") or ""
