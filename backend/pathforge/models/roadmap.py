"""Roadmap, phase and task models - the guided project workflow"""
from sqlalchemy import (
    Column, String, DateTime, Enum as SQLEnum, Integer, Float, Text, ForeignKey, JSON, Boolean, Index
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid


class BuildMode(str, enum.Enum):
    """How much AI help a team gets - drives timelines, task lists and prompts"""
    AI_FIRST = "AI_FIRST"
    BALANCED = "BALANCED"
    GUIDED = "GUIDED"


class RoadmapStatus(str, enum.Enum):
    GENERATED = "GENERATED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class PhaseStatus(str, enum.Enum):
    LOCKED = "LOCKED"
    ACTIVE = "ACTIVE"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskStatus(str, enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskDifficulty(str, enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Roadmap(Base):
    """One roadmap per team"""
    __tablename__ = "roadmaps"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    team_id = Column(GUID, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, unique=True)
    project_id = Column(GUID, ForeignKey("project_suggestions.id", ondelete="SET NULL"), nullable=True)
    build_mode = Column(SQLEnum(BuildMode), nullable=False)
    total_estimated_days = Column(Integer, nullable=False)
    status = Column(SQLEnum(RoadmapStatus), default=RoadmapStatus.GENERATED, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    team = relationship("Team", lazy="selectin")
    project = relationship("ProjectSuggestion", lazy="selectin")
    phases = relationship(
        "Phase",
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="Phase.order",
    )

    def __repr__(self):
        return f"<Roadmap {self.id} ({self.build_mode})>"


class Phase(Base):
    __tablename__ = "phases"

    __table_args__ = (
        Index('ix_phases_roadmap_order', 'roadmap_id', 'order'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    roadmap_id = Column(GUID, ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    estimated_days = Column(Integer, nullable=False)
    status = Column(SQLEnum(PhaseStatus), default=PhaseStatus.LOCKED, nullable=False)
    start_date = Column(DateTime, nullable=True)
    due_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    roadmap = relationship("Roadmap", back_populates="phases")
    tasks = relationship(
        "Task",
        back_populates="phase",
        cascade="all, delete-orphan",
        order_by="Task.order",
    )

    def __repr__(self):
        return f"<Phase {self.order}: {self.name} [{self.status}]>"


class Task(Base):
    __tablename__ = "tasks"

    __table_args__ = (
        Index('ix_tasks_phase_order', 'phase_id', 'order'),
        Index('ix_tasks_assigned_to', 'assigned_to'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    phase_id = Column(GUID, ForeignKey("phases.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    assigned_to = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    difficulty = Column(SQLEnum(TaskDifficulty), nullable=False)
    estimated_hours = Column(Float, nullable=False)
    status = Column(SQLEnum(TaskStatus), default=TaskStatus.TODO, nullable=False)
    learning_resources = Column(JSON, default=list)
    concept_checkpoint = Column(Boolean, default=False, nullable=False)

    # Execution tracking
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    actual_hours = Column(Float, default=0)
    notes = Column(Text, default="")
    error_reported = Column(Boolean, default=False, nullable=False)
    help_requested = Column(Boolean, default=False, nullable=False)
    prompts_viewed = Column(JSON, default=list)  # prompt texts copied by anyone on the team

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    phase = relationship("Phase", back_populates="tasks")
    assignee = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<Task {self.order}: {self.title} [{self.status}]>"
