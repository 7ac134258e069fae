"""Per-user activity on a task: execution sessions, prompt usage and confirmations"""
from sqlalchemy import Column, String, DateTime, Integer, Float, Text, ForeignKey, Boolean, Index
from datetime import datetime

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid


class TaskExecution(Base):
    """One start/complete cycle of a task by its assignee"""
    __tablename__ = "task_executions"

    __table_args__ = (
        Index('ix_task_executions_task_user', 'task_id', 'user_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    time_spent_minutes = Column(Integer, default=0)
    notes = Column(Text, default="")
    error_reported = Column(Boolean, default=False, nullable=False)
    error_description = Column(Text, default="")
    help_requested = Column(Boolean, default=False, nullable=False)
    support_ticket_id = Column(String(100), nullable=True)

    def calculate_time_spent(self) -> int:
        if self.completed_at and self.started_at:
            minutes = (self.completed_at - self.started_at).total_seconds() / 60
            self.time_spent_minutes = int(round(minutes))
        return self.time_spent_minutes or 0


class PromptHistory(Base):
    """A prompt a user copied or scrolled past"""
    __tablename__ = "prompt_history"

    __table_args__ = (
        Index('ix_prompt_history_task_user', 'task_id', 'user_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    prompt_text = Column(Text, nullable=False)
    prompt_type = Column(String(32), nullable=True)
    prompt_step = Column(Float, nullable=True)
    viewed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    copied_at = Column(DateTime, nullable=True)
    used = Column(Boolean, default=False, nullable=False)
    scrolled_into_view = Column(Boolean, default=False, nullable=False)
    scrolled_at = Column(DateTime, nullable=True)


class PromptView(Base):
    """Prompt step a user has seen - drives the completion gate"""
    __tablename__ = "prompt_views"

    __table_args__ = (
        Index('ix_prompt_views_task_user_step', 'task_id', 'user_id', 'prompt_step', unique=True),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    prompt_step = Column(Float, nullable=False)
    viewed_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UnderstandingConfirmation(Base):
    __tablename__ = "understanding_confirmations"

    __table_args__ = (
        Index('ix_understanding_task_user', 'task_id', 'user_id', unique=True),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    task_id = Column(GUID, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    confirmed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
