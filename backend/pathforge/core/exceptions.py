"""
Custom Exceptions for PathForge
===============================

Service-layer code raises these instead of HTTPException so that the
guidance services can be reused outside a request (seed scripts, tests).
The app registers a handler that turns them into JSON responses using
``status_code``.

Usage:
    from pathforge.core.exceptions import TaskNotFoundError, WorkflowError

    if not task:
        raise TaskNotFoundError(task_id)

    if task.status != TaskStatus.TODO:
        raise WorkflowError("Task is already completed")
"""

from typing import Optional, Any, Dict


class PathForgeError(Exception):
    """Base exception for all PathForge errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Authorization Errors
# ============================================


class AuthorizationError(PathForgeError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(PathForgeError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class TeamNotFoundError(ResourceNotFoundError):
    def __init__(self, team_id: str):
        super().__init__("Team", team_id)


class RoadmapNotFoundError(ResourceNotFoundError):
    def __init__(self, roadmap_id: str):
        super().__init__("Roadmap", roadmap_id)


class PhaseNotFoundError(ResourceNotFoundError):
    def __init__(self, phase_id: str):
        super().__init__("Phase", phase_id)


class TaskNotFoundError(ResourceNotFoundError):
    def __init__(self, task_id: str):
        super().__init__("Task", task_id)


class ProjectNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class DocumentNotFoundError(ResourceNotFoundError):
    def __init__(self, document_id: str):
        super().__init__("Documentation", document_id)


class QuestionNotFoundError(ResourceNotFoundError):
    def __init__(self, question_id: str):
        super().__init__("Question", question_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(PathForgeError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class WorkflowError(PathForgeError):
    """A phase/task transition is not allowed in the current state"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="WORKFLOW_ERROR", details=details)


class VivaNotEligibleError(PathForgeError):
    """Viva preparation is locked until enough phases are completed"""

    status_code = 403

    def __init__(self, message: str, eligibility: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VIVA_NOT_ELIGIBLE", details=eligibility)


# ============================================
# AI Service Errors
# ============================================

class AIServiceError(PathForgeError):
    """AI service failure"""

    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, code="AI_SERVICE_ERROR")


class AIResponseParseError(AIServiceError):
    """AI response did not follow the expected section layout"""

    def __init__(self, message: str = "Failed to parse AI response"):
        super().__init__(message)
        self.code = "AI_PARSE_ERROR"


def error_response(error: PathForgeError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "detail": error.message,
        "code": error.code,
        "details": error.details
    }
