"""Student team - one leader plus members joining by invite code"""
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, ForeignKey, Boolean, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import secrets

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid
from pathforge.models.roadmap import BuildMode


def generate_invite_code() -> str:
    """Eight uppercase hex characters from 4 random bytes"""
    return secrets.token_hex(4).upper()


class Team(Base):
    __tablename__ = "teams"

    __table_args__ = (
        Index('ix_teams_leader_id', 'leader_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    invite_code = Column(String(16), unique=True, index=True, nullable=False)
    # No FK: users.team_id already points here and the cycle breaks drop_all on SQLite
    leader_id = Column(GUID, nullable=False)

    project_title = Column(String(255), nullable=True)
    selected_project_id = Column(GUID, ForeignKey("project_suggestions.id", ondelete="SET NULL"), nullable=True)
    build_mode = Column(SQLEnum(BuildMode), nullable=True)
    roadmap_id = Column(GUID, nullable=True)

    max_members = Column(Integer, default=5, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    members = relationship(
        "User",
        back_populates="team",
        foreign_keys="User.team_id",
        lazy="selectin",
        order_by="User.created_at",
    )
    leader = relationship(
        "User",
        primaryjoin="foreign(Team.leader_id) == User.id",
        viewonly=True,
        lazy="selectin",
    )

    def has_member(self, user_id: str) -> bool:
        return any(str(m.id) == str(user_id) for m in self.members)

    def __repr__(self):
        return f"<Team {self.name}>"
