"""
Roadmap templates: the six phases, per-mode timelines and task lists.

Keys of ``TIMELINES`` and ``TASK_TEMPLATES`` are phase names, so renaming a
phase in ``PHASE_TEMPLATES`` means renaming it everywhere in this module.
"""
from typing import Any, Dict, List, Optional

from pathforge.models.roadmap import BuildMode, TaskDifficulty

EASY = TaskDifficulty.EASY
MEDIUM = TaskDifficulty.MEDIUM
HARD = TaskDifficulty.HARD

PROBLEM_UNDERSTANDING = "Problem Understanding"
SYSTEM_DESIGN = "System Design & Architecture"
DEVELOPMENT = "Development (AI-Orchestrated)"
TESTING = "Testing & Validation"
DOCUMENTATION = "Documentation"
VIVA_PREP = "Viva/Interview Preparation"

PHASE_TEMPLATES: List[Dict[str, str]] = [
    {
        "name": PROBLEM_UNDERSTANDING,
        "description": "Analyze requirements, identify stakeholders, and understand the problem domain",
    },
    {
        "name": SYSTEM_DESIGN,
        "description": "Design system architecture, database schema, and API structure",
    },
    {
        "name": DEVELOPMENT,
        "description": "Implement features with AI assistance and guidance",
    },
    {
        "name": TESTING,
        "description": "Write tests, validate functionality, and ensure quality",
    },
    {
        "name": DOCUMENTATION,
        "description": "Create technical documentation, user guides, and API docs",
    },
    {
        "name": VIVA_PREP,
        "description": "Prepare presentation, practice questions, and review concepts",
    },
]

# Days per phase
TIMELINES: Dict[BuildMode, Dict[str, int]] = {
    BuildMode.AI_FIRST: {
        PROBLEM_UNDERSTANDING: 3,
        SYSTEM_DESIGN: 5,
        DEVELOPMENT: 20,
        TESTING: 7,
        DOCUMENTATION: 5,
        VIVA_PREP: 5,
    },
    BuildMode.BALANCED: {
        PROBLEM_UNDERSTANDING: 7,
        SYSTEM_DESIGN: 10,
        DEVELOPMENT: 45,
        TESTING: 12,
        DOCUMENTATION: 8,
        VIVA_PREP: 8,
    },
    BuildMode.GUIDED: {
        PROBLEM_UNDERSTANDING: 10,
        SYSTEM_DESIGN: 15,
        DEVELOPMENT: 60,
        TESTING: 15,
        DOCUMENTATION: 10,
        VIVA_PREP: 10,
    },
}


def _task(
    title: str,
    description: str,
    difficulty: TaskDifficulty,
    hours: float,
    checkpoint: bool = False,
    resources: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "title": title,
        "description": description,
        "difficulty": difficulty,
        "hours": hours,
        "checkpoint": checkpoint,
        "resources": resources or [],
    }


TASK_TEMPLATES: Dict[BuildMode, Dict[str, List[Dict[str, Any]]]] = {
    BuildMode.AI_FIRST: {
        PROBLEM_UNDERSTANDING: [
            _task("Analyze requirements", "Review and understand project requirements", EASY, 4),
            _task("Identify key features", "List core features to implement", EASY, 3),
            _task("Define success criteria", "Establish metrics for project success", MEDIUM, 2),
        ],
        SYSTEM_DESIGN: [
            _task("Design system architecture", "Create high-level system design", MEDIUM, 8),
            _task("Plan database schema", "Design data models and relationships", MEDIUM, 6),
            _task("Define API endpoints", "List required API routes", EASY, 4),
        ],
        DEVELOPMENT: [
            _task("Setup project structure", "Initialize project with dependencies", EASY, 4),
            _task("Implement core features", "Build main functionality with AI assistance", HARD, 80),
            _task("Integration and refinement", "Connect components and refine", MEDIUM, 20),
        ],
        TESTING: [
            _task("Unit testing", "Write tests for components", MEDIUM, 16),
            _task("Integration testing", "Test component interactions", MEDIUM, 12),
            _task("Bug fixes", "Identify and fix issues", MEDIUM, 8),
        ],
        DOCUMENTATION: [
            _task("Technical documentation", "Document architecture and code", EASY, 12),
            _task("User guide", "Create user instructions", EASY, 8),
            _task("API documentation", "Document API endpoints", EASY, 6),
        ],
        VIVA_PREP: [
            _task("Prepare presentation", "Create project presentation slides", MEDIUM, 8),
            _task("Practice demo", "Rehearse project demonstration", EASY, 6),
            _task("Review concepts", "Study technical concepts used", MEDIUM, 6),
        ],
    },
    BuildMode.BALANCED: {
        PROBLEM_UNDERSTANDING: [
            _task("Detailed requirement analysis", "Deep dive into project requirements and constraints", MEDIUM, 8),
            _task("Stakeholder identification", "Identify and document all stakeholders", EASY, 4),
            _task("Use case development", "Create detailed use case diagrams", MEDIUM, 6),
            _task("Problem domain research", "Research similar solutions and best practices", MEDIUM, 8),
            _task("Success criteria definition", "Define clear, measurable success metrics", EASY, 3),
        ],
        SYSTEM_DESIGN: [
            _task("Architecture design", "Design comprehensive system architecture with diagrams", HARD, 12),
            _task("Database schema design", "Create detailed database schema with relationships", MEDIUM, 10),
            _task("API design", "Design RESTful API with documentation", MEDIUM, 8),
            _task("Technology stack selection", "Choose and justify technology choices", MEDIUM, 6),
            _task("Security considerations", "Plan authentication and authorization", HARD, 8),
        ],
        DEVELOPMENT: [
            _task("Project setup and configuration", "Initialize project with proper structure", EASY, 6),
            _task("Authentication module", "Implement user authentication with JWT", MEDIUM, 20),
            _task("Core feature implementation", "Build main features with AI guidance", HARD, 120),
            _task("UI/UX development", "Create responsive user interface", MEDIUM, 40),
            _task("API integration", "Connect frontend with backend APIs", MEDIUM, 24),
            _task("Code review and refactoring", "Review and improve code quality", MEDIUM, 16),
        ],
        TESTING: [
            _task("Unit test development", "Write comprehensive unit tests", MEDIUM, 24),
            _task("Integration testing", "Test component and API integration", MEDIUM, 20),
            _task("User acceptance testing", "Conduct UAT with sample users", EASY, 12),
            _task("Performance testing", "Test and optimize performance", HARD, 16),
            _task("Bug tracking and fixes", "Identify, track, and fix bugs", MEDIUM, 20),
        ],
        DOCUMENTATION: [
            _task("Technical documentation", "Document architecture, design decisions, and code", MEDIUM, 16),
            _task("API documentation", "Create comprehensive API documentation", EASY, 12),
            _task("User manual", "Write detailed user guide", EASY, 10),
            _task("Setup instructions", "Document installation and setup process", EASY, 6),
        ],
        VIVA_PREP: [
            _task("Presentation creation", "Create detailed project presentation", MEDIUM, 12),
            _task("Concept review", "Review and understand all technical concepts", HARD, 16),
            _task("Demo preparation", "Prepare and practice live demonstration", MEDIUM, 10),
            _task("Q&A practice", "Practice answering potential questions", MEDIUM, 8),
        ],
    },
    BuildMode.GUIDED: {
        PROBLEM_UNDERSTANDING: [
            _task("Learn requirement analysis fundamentals", "Study requirement gathering techniques", EASY, 6, checkpoint=True, resources=["Requirement engineering basics", "Stakeholder analysis guide"]),
            _task("Conduct stakeholder analysis", "Identify and document stakeholders with templates", EASY, 6, resources=["Stakeholder mapping worksheet"]),
            _task("Create use case diagrams", "Learn and create UML use case diagrams", MEDIUM, 8, checkpoint=True, resources=["UML tutorial", "Use case examples"]),
            _task("Research domain knowledge", "Deep dive into problem domain with guided resources", MEDIUM, 10, resources=["Domain-specific articles", "Industry case studies"]),
            _task("Problem statement refinement", "Write clear, concise problem statement", EASY, 4),
            _task("Success criteria workshop", "Learn SMART goals and define project success", EASY, 6, checkpoint=True, resources=["SMART goals guide"]),
        ],
        SYSTEM_DESIGN: [
            _task("Learn architecture patterns", "Study common architectural patterns", MEDIUM, 10, checkpoint=True, resources=["Architecture patterns guide", "MVC vs MVVM comparison"]),
            _task("Design system architecture", "Apply learned patterns to your project", HARD, 16, resources=["Architecture diagram tools"]),
            _task("Database fundamentals", "Learn normalization and schema design", MEDIUM, 12, checkpoint=True, resources=["Database design tutorial", "Normalization guide"]),
            _task("Create database schema", "Design normalized database schema", MEDIUM, 12),
            _task("REST API concepts", "Learn RESTful API design principles", MEDIUM, 10, checkpoint=True, resources=["REST API best practices", "HTTP methods guide"]),
            _task("Design API endpoints", "Apply REST principles to design APIs", MEDIUM, 10),
            _task("Security fundamentals", "Learn authentication and authorization", HARD, 12, checkpoint=True, resources=["JWT explained", "OAuth2 basics"]),
        ],
        DEVELOPMENT: [
            _task("Setup development environment", "Learn and configure dev environment", EASY, 8, checkpoint=True, resources=["Environment setup guide"]),
            _task("Version control basics", "Learn Git fundamentals", EASY, 6, checkpoint=True, resources=["Git tutorial", "GitHub workflow"]),
            _task("Project structure setup", "Organize project following best practices", EASY, 6, resources=["Project structure guide"]),
            _task("Authentication implementation", "Build auth system step-by-step with tutorials", HARD, 30, checkpoint=True, resources=["Auth tutorial series"]),
            _task("Frontend fundamentals", "Learn modern frontend framework basics", MEDIUM, 20, checkpoint=True, resources=["React/Vue basics", "Component architecture"]),
            _task("UI component development", "Build reusable UI components", MEDIUM, 40, resources=["Component library examples"]),
            _task("Backend API development", "Create backend APIs with guidance", HARD, 50, checkpoint=True, resources=["API development guide"]),
            _task("State management", "Learn and implement state management", HARD, 24, checkpoint=True, resources=["State management patterns"]),
            _task("Integration and testing", "Connect all parts and verify functionality", MEDIUM, 30),
            _task("Code review workshop", "Learn code review practices and apply", MEDIUM, 12, checkpoint=True, resources=["Code review checklist"]),
        ],
        TESTING: [
            _task("Testing fundamentals", "Learn testing concepts and types", EASY, 8, checkpoint=True, resources=["Testing pyramid", "Unit vs Integration tests"]),
            _task("Unit testing practice", "Write unit tests with guidance", MEDIUM, 30, resources=["Jest/Testing library guide"]),
            _task("Integration testing", "Learn and implement integration tests", MEDIUM, 24, checkpoint=True, resources=["Integration testing patterns"]),
            _task("E2E testing basics", "Introduction to end-to-end testing", MEDIUM, 16, checkpoint=True, resources=["E2E testing guide"]),
            _task("Bug tracking workflow", "Learn bug tracking and resolution process", EASY, 6, checkpoint=True, resources=["Bug tracking best practices"]),
            _task("Performance optimization", "Learn and apply performance optimization", HARD, 20, checkpoint=True, resources=["Performance optimization guide"]),
        ],
        DOCUMENTATION: [
            _task("Documentation best practices", "Learn technical writing fundamentals", EASY, 6, checkpoint=True, resources=["Technical writing guide"]),
            _task("Architecture documentation", "Document system design with diagrams", MEDIUM, 16, resources=["Documentation templates"]),
            _task("API documentation", "Create API docs with Swagger/OpenAPI", MEDIUM, 14, checkpoint=True, resources=["Swagger tutorial"]),
            _task("Code documentation", "Write inline comments and JSDoc", EASY, 10, resources=["Code commenting guide"]),
            _task("User manual creation", "Write user-friendly documentation", EASY, 12),
            _task("README and setup guide", "Create comprehensive README", EASY, 6, resources=["README best practices"]),
        ],
        VIVA_PREP: [
            _task("Presentation skills workshop", "Learn effective presentation techniques", EASY, 8, checkpoint=True, resources=["Presentation tips", "Slide design guide"]),
            _task("Create project presentation", "Build comprehensive presentation", MEDIUM, 16),
            _task("Technical concept deep-dive", "Master all technical concepts used", HARD, 24, checkpoint=True, resources=["Concept cheat sheets"]),
            _task("Demo preparation", "Practice live demonstration multiple times", MEDIUM, 12),
            _task("Common questions practice", "Prepare answers for typical viva questions", MEDIUM, 12, resources=["Viva question bank"]),
            _task("Mock interview", "Conduct practice interview sessions", MEDIUM, 8, checkpoint=True),
        ],
    },
}


def total_days(build_mode: BuildMode) -> int:
    return sum(TIMELINES[build_mode].values())
