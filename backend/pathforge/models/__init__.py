# Re-export all models for convenient imports
from pathforge.models.roadmap import (
    Roadmap, Phase, Task,
    BuildMode, RoadmapStatus, PhaseStatus, TaskStatus, TaskDifficulty,
)
from pathforge.models.user import User, UserRole, AcademicYear, ProjectField
from pathforge.models.project_suggestion import ProjectSuggestion, ProjectDifficulty
from pathforge.models.team import Team
from pathforge.models.task_activity import TaskExecution, PromptHistory, PromptView, UnderstandingConfirmation
from pathforge.models.error_log import ErrorLog, ErrorType
from pathforge.models.documentation import DocumentGeneration, DOCUMENT_SECTIONS
from pathforge.models.viva import VivaQuestion, VivaPrep, VivaCategory, QuestionDifficulty, ConfidenceLevel

__all__ = [
    # Roadmap
    "Roadmap",
    "Phase",
    "Task",
    "BuildMode",
    "RoadmapStatus",
    "PhaseStatus",
    "TaskStatus",
    "TaskDifficulty",
    # User / team
    "User",
    "UserRole",
    "AcademicYear",
    "ProjectField",
    "Team",
    # Catalogue
    "ProjectSuggestion",
    "ProjectDifficulty",
    # Task activity
    "TaskExecution",
    "PromptHistory",
    "PromptView",
    "UnderstandingConfirmation",
    # Errors
    "ErrorLog",
    "ErrorType",
    # Documentation
    "DocumentGeneration",
    "DOCUMENT_SECTIONS",
    # Viva
    "VivaQuestion",
    "VivaPrep",
    "VivaCategory",
    "QuestionDifficulty",
    "ConfidenceLevel",
]
