"""Project documentation assembled from roadmap activity"""
from sqlalchemy import Column, DateTime, Enum as SQLEnum, Integer, ForeignKey, JSON, Boolean
from datetime import datetime

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid
from pathforge.models.roadmap import BuildMode


DOCUMENT_SECTIONS = (
    "abstract",
    "problem_statement",
    "methodology",
    "architecture",
    "implementation",
    "error_learning",
    "results",
    "conclusion",
)


class DocumentGeneration(Base):
    __tablename__ = "document_generations"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    project_id = Column(GUID, ForeignKey("project_suggestions.id", ondelete="SET NULL"), nullable=True)
    roadmap_id = Column(GUID, ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False, unique=True)
    team_id = Column(GUID, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    build_mode = Column(SQLEnum(BuildMode), nullable=False)

    # {section: {text, generated_from[], last_updated}}
    content = Column(JSON, nullable=False, default=dict)
    # {section: {edited_text, edited_at}}
    user_edits = Column(JSON, nullable=False, default=dict)

    phases_completed = Column(Integer, default=0, nullable=False)
    total_phases = Column(Integer, default=0, nullable=False)
    can_generate = Column(Boolean, default=False, nullable=False)
    is_complete = Column(Boolean, default=False, nullable=False)

    generated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_regenerated_at = Column(DateTime, nullable=True)
    generation_version = Column(Integer, default=1, nullable=False)
