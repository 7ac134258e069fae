from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from pathforge.core.database import Base
from pathforge.core.types import GUID, generate_uuid
from pathforge.models.roadmap import BuildMode


class UserRole(str, enum.Enum):
    """Team roles chosen at registration"""
    LEADER = "leader"
    MEMBER = "member"


class AcademicYear(str, enum.Enum):
    FIRST = "1st Year"
    SECOND = "2nd Year"
    THIRD = "3rd Year"
    FOURTH = "4th Year"


class ProjectField(str, enum.Enum):
    """Project domains offered during onboarding"""
    WEB_DEVELOPMENT = "Web Development"
    DATA_SCIENCE = "Data Science"
    MACHINE_LEARNING = "Machine Learning"
    ARTIFICIAL_INTELLIGENCE = "Artificial Intelligence"
    CYBER_SECURITY = "Cyber Security"
    BLOCKCHAIN = "Blockchain"
    APP_DEVELOPMENT = "App Development"
    IOT = "IoT"
    CLOUD_DEVOPS = "Cloud / DevOps"


class User(Base):
    """Student account with onboarding profile"""
    __tablename__ = "users"

    __table_args__ = (
        Index('ix_users_team_id', 'team_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    team_id = Column(GUID, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)

    # Academic profile (onboarding)
    academic_year = Column(SQLEnum(AcademicYear, values_callable=lambda e: [m.value for m in e]), nullable=True)
    project_field = Column(SQLEnum(ProjectField, values_callable=lambda e: [m.value for m in e]), nullable=True)
    selected_project_id = Column(GUID, ForeignKey("project_suggestions.id", ondelete="SET NULL"), nullable=True)
    build_mode = Column(SQLEnum(BuildMode), nullable=True)
    onboarding_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    team = relationship("Team", back_populates="members", foreign_keys=[team_id])

    @property
    def is_leader(self) -> bool:
        return self.role == UserRole.LEADER

    def __repr__(self):
        return f"<User {self.email}>"
