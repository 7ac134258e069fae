"""
Error Analysis Service

Turns a student's self-reported error or confusion into a learning note:
what went wrong, why, the concept behind it, a better question to ask an
assistant, and what to try next. It teaches the concept rather than
handing out a fix.

Classification is keyword based. The analysis comes from Claude when an
API key is configured and from per-type templates otherwise.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.exceptions import AIServiceError, TaskNotFoundError
from pathforge.core.logging_config import logger
from pathforge.models.error_log import ErrorLog, ErrorType
from pathforge.models.project_suggestion import ProjectSuggestion
from pathforge.models.roadmap import BuildMode
from pathforge.models.team import Team
from pathforge.services.roadmap_service import get_task_context
from pathforge.utils.claude_client import claude_client


# Checked in this order; the first group with a hit wins
CLASSIFICATION_RULES: List[Tuple[ErrorType, Tuple[str, ...]]] = [
    (ErrorType.SYNTAX, (
        "syntaxerror", "unexpected token", "parsing error", "invalid syntax",
    )),
    (ErrorType.RUNTIME, (
        "error:", "exception", "undefined", "null", "cannot read property",
        "is not a function", "referenceerror", "typeerror",
    )),
    (ErrorType.CONCEPTUAL, (
        "what is", "how does", "explain", "i don't understand", "what are", "why do we need",
    )),
    (ErrorType.LOGICAL, (
        "not working", "wrong output", "unexpected result", "should be", "instead of",
    )),
]


def classify_error(error_input: str) -> ErrorType:
    text = (error_input or "").lower()
    for error_type, keywords in CLASSIFICATION_RULES:
        if any(keyword in text for keyword in keywords):
            return error_type
    return ErrorType.CONFUSION


def truncate_to_sentences(text: str, count: int) -> str:
    sentences = re.findall(r"[^.!?]+[.!?]+", text or "")
    if not sentences:
        return (text or "").strip()
    return " ".join(s.strip() for s in sentences[:count]).strip()


def split_steps(text: str) -> List[str]:
    """'1. foo\\n2. bar' -> ['foo', 'bar']"""
    steps = []
    for line in (text or "").splitlines():
        line = re.sub(r"^\s*(?:\d+[.)]|[-*•])\s*", "", line).strip()
        if line:
            steps.append(line)
    return steps


def concept_label(concept: str) -> str:
    """Short grouping key: the bold name of a template concept or the text before ':'"""
    concept = (concept or "").strip()
    match = re.match(r"\*\*(.+?)\*\*", concept)
    if match:
        return match.group(1).strip()
    head = concept.split(":", 1)[0].split("\n", 1)[0].strip()
    return head[:80] or "General programming concepts"


def _template_analysis(error_type: ErrorType, context: Dict[str, Any]) -> Dict[str, Any]:
    task_title = context.get("task_title", "this task")
    project_title = context.get("project_title", "your project")

    templates = {
        ErrorType.SYNTAX: {
            "what_went_wrong": "There's a syntax error in your code. This means the code structure doesn't follow the language rules.",
            "why_it_happened": "Syntax errors occur when you write code that the compiler or interpreter can't understand. It's like a grammatical error in written language.",
            "concept_involved": "**Syntax Rules**: Every programming language has specific rules for how code must be written. Understanding these rules is fundamental to writing valid code.",
            "improved_prompt": 'Ask AI: "What are the common syntax rules for [language you\'re using]? Can you explain each rule with examples?"',
            "next_steps": [
                "Review the language's syntax documentation",
                "Use a code editor with syntax highlighting",
                "Practice reading and identifying syntax patterns",
            ],
        },
        ErrorType.RUNTIME: {
            "what_went_wrong": "Your code compiled successfully but encountered an error while running. This typically involves variables, functions, or data that don't exist or aren't what the code expects.",
            "why_it_happened": "Runtime errors happen when code tries to perform an invalid operation during execution, like accessing undefined data or calling non-existent functions.",
            "concept_involved": "**Runtime Behavior**: Understanding how code executes step-by-step and how data flows through your program is crucial for finding these errors.",
            "improved_prompt": f'Ask AI: "Explain how [specific error type] occurs in {task_title}. What causes this and how can I debug it?"',
            "next_steps": [
                "Add log statements to trace execution flow",
                "Use a debugger to inspect variables",
                "Read error stack traces carefully",
            ],
        },
        ErrorType.LOGICAL: {
            "what_went_wrong": "Your code runs without errors but produces incorrect or unexpected results. This means the logic doesn't match what you intended.",
            "why_it_happened": "Logical errors stem from incorrect algorithms, wrong assumptions, or misunderstanding of how operations work together.",
            "concept_involved": "**Algorithm Design**: Creating correct step-by-step logic to solve problems. This requires understanding both the problem and the solution approach.",
            "improved_prompt": f'Ask AI: "For {task_title}, what is the correct logic flow? Walk me through the step-by-step process."',
            "next_steps": [
                "Write out the expected behavior in plain language",
                "Trace through your code manually with test data",
                "Compare expected vs actual results at each step",
            ],
        },
        ErrorType.CONCEPTUAL: {
            "what_went_wrong": "You're encountering a concept that isn't clear yet. This is completely normal when learning!",
            "why_it_happened": "Programming involves many interconnected concepts. Sometimes we need to step back and build foundational understanding before moving forward.",
            "concept_involved": f"**Foundational Understanding**: The concept you're asking about is important for {task_title}. Let's break it down.",
            "improved_prompt": f'Ask AI: "Explain [the concept you\'re confused about] in simple terms with a real-world analogy. Then show how it applies to {project_title}."',
            "next_steps": [
                "Start with the basic definition and purpose",
                "Look for real-world analogies",
                "Find simple examples before tackling your project",
            ],
        },
        ErrorType.CONFUSION: {
            "what_went_wrong": "You're feeling stuck or uncertain about how to proceed. That's a sign you need clearer direction!",
            "why_it_happened": "Sometimes we need to break down the problem into smaller pieces or get clarity on what we're trying to achieve.",
            "concept_involved": "**Problem Decomposition**: Breaking complex tasks into manageable steps is a crucial development skill.",
            "improved_prompt": f'Ask AI: "Break down {task_title} into very small, specific steps. What should I focus on first?"',
            "next_steps": [
                "Write down what you know and what you don't know",
                "Identify the smallest next step you can take",
                "Ask specific questions about that one step",
            ],
        },
    }
    return templates[error_type]


_SECTION_HEADERS = [
    ("what_went_wrong", "WHAT WENT WRONG", "Unable to analyze error."),
    ("why_it_happened", "WHY IT HAPPENED", "Please review the error context."),
    ("concept_involved", "CONCEPT INVOLVED", "General programming concepts"),
    ("improved_prompt", "IMPROVED PROMPT", "Ask AI to explain the error in detail."),
    ("next_steps", "NEXT STEPS", "Review the documentation and try again."),
]


def parse_ai_response(response: str, build_mode) -> Dict[str, Any]:
    """Split a bracketed-section response; AI_FIRST keeps 2 sentences per field"""
    analysis: Dict[str, Any] = {}
    headers = [h for _, h, _ in _SECTION_HEADERS]

    for index, (key, header, default) in enumerate(_SECTION_HEADERS):
        following = "|".join(re.escape(f"[{h}]") for h in headers[index + 1:])
        lookahead = f"(?={following}|$)" if following else "$"
        match = re.search(rf"\[{re.escape(header)}\]([\s\S]*?){lookahead}", response, re.IGNORECASE)
        analysis[key] = match.group(1).strip() if match and match.group(1).strip() else default

    analysis["next_steps"] = split_steps(analysis["next_steps"]) or [analysis["next_steps"]]

    if build_mode == BuildMode.AI_FIRST:
        for key in ("what_went_wrong", "why_it_happened", "concept_involved"):
            analysis[key] = truncate_to_sentences(analysis[key], 2)
        analysis["next_steps"] = analysis["next_steps"][:2]

    return analysis


DEPTH_HINTS = {
    BuildMode.AI_FIRST: "Brief and direct",
    BuildMode.BALANCED: "Moderate detail",
    BuildMode.GUIDED: "Detailed with analogies",
}


def _build_prompt(error_input: str, error_type: ErrorType, context: Dict[str, Any]) -> str:
    build_mode = context.get("build_mode")
    return f"""You are an educational AI assistant helping students learn from errors and confusion.

Context:
- Project: {context.get('project_title')} ({context.get('project_domain', '')})
- Task: {context.get('task_title')}
- Task Description: {context.get('task_description')}
- Build Mode: {build_mode.value if build_mode else ''}
- Current Phase: {context.get('phase_name')}

Error Type: {error_type.value}
Student's Input: {error_input}

Respond with EXACTLY these 5 sections (use these exact headers):

[WHAT WENT WRONG]
Simple, non-technical explanation of what failed or what's confusing.

[WHY IT HAPPENED]
Concept-level reasoning - explain the underlying principle or misunderstanding.

[CONCEPT INVOLVED]
Name the specific concept they need to learn, with a brief definition and a real-world analogy.

[IMPROVED PROMPT]
ONE ready-to-use prompt focused on understanding rather than getting code.

[NEXT STEPS]
2-3 actionable learning steps, one per line - NO CODE.

Rules: teach thinking, not fixes. Keep each section to 2-4 sentences.
Depth: {DEPTH_HINTS.get(build_mode, 'Moderate detail')}"""


class ErrorAnalysisService:
    """Classify, analyse and persist self-reported errors"""

    async def build_context(self, db: AsyncSession, task_id: str) -> Dict[str, Any]:
        task, phase, roadmap = await get_task_context(db, task_id)
        if not task:
            raise TaskNotFoundError(task_id)

        project = None
        if roadmap.project_id:
            result = await db.execute(select(ProjectSuggestion).where(ProjectSuggestion.id == roadmap.project_id))
            project = result.scalar_one_or_none()

        team_result = await db.execute(select(Team).where(Team.id == roadmap.team_id))
        team = team_result.scalar_one_or_none()

        return {
            "task": task,
            "task_title": task.title,
            "task_description": task.description,
            "phase_id": phase.id,
            "phase_name": phase.name,
            "roadmap_id": roadmap.id,
            "project_title": (project.title if project else None) or (team.project_title if team else None)
            or "Unknown Project",
            "project_domain": project.domain if project else "",
            "build_mode": roadmap.build_mode,
            "team_id": roadmap.team_id,
        }

    async def analyze(self, error_input: str, context: Dict[str, Any]) -> Tuple[ErrorType, Dict[str, Any]]:
        error_type = classify_error(error_input)

        if claude_client.is_configured():
            try:
                response = await claude_client.generate(
                    prompt=_build_prompt(error_input, error_type, context),
                    model="haiku",
                    max_tokens=1024,
                )
                return error_type, parse_ai_response(response["content"], context.get("build_mode"))
            except AIServiceError as e:
                logger.warning(f"AI error analysis failed, using template: {e}")

        return error_type, _template_analysis(error_type, context)

    async def log_error(self, db: AsyncSession, user_id: str, task_id: str, error_input: str) -> ErrorLog:
        context = await self.build_context(db, task_id)
        error_type, analysis = await self.analyze(error_input, context)

        error_log = ErrorLog(
            task_id=context["task"].id,
            user_id=user_id,
            phase_id=context["phase_id"],
            project_title=context["project_title"],
            build_mode=context["build_mode"],
            error_input=error_input.strip(),
            error_type=error_type,
            analysis=analysis,
            resolved=False,
        )
        db.add(error_log)
        await db.flush()

        logger.info(
            f"Error logged for task {task_id}: {error_type.value}",
            extra={"error_log_id": error_log.id, "error_type": error_type.value},
        )
        return error_log

    async def get_task_errors(self, db: AsyncSession, user_id: str, task_id: str, limit: int = 50) -> List[ErrorLog]:
        result = await db.execute(
            select(ErrorLog)
            .where(ErrorLog.task_id == str(task_id), ErrorLog.user_id == str(user_id))
            .order_by(ErrorLog.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_user_error(self, db: AsyncSession, user_id: str, error_id: str) -> Optional[ErrorLog]:
        result = await db.execute(
            select(ErrorLog).where(ErrorLog.id == str(error_id), ErrorLog.user_id == str(user_id))
        )
        return result.scalar_one_or_none()

    async def get_user_concepts(self, db: AsyncSession, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Concepts behind the user's errors, most frequent first"""
        result = await db.execute(select(ErrorLog).where(ErrorLog.user_id == str(user_id)))
        return group_concepts(result.scalars().all())[:limit]


def group_concepts(errors) -> List[Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {}
    for error in errors:
        label = concept_label(error.concept_involved)
        group = groups.setdefault(label, {
            "concept": label,
            "count": 0,
            "resolved_count": 0,
            "last_occurrence": None,
        })
        group["count"] += 1
        if error.resolved:
            group["resolved_count"] += 1
        if group["last_occurrence"] is None or error.created_at > group["last_occurrence"]:
            group["last_occurrence"] = error.created_at

    concepts = sorted(groups.values(), key=lambda g: g["count"], reverse=True)
    for concept in concepts:
        concept["unresolved_count"] = concept["count"] - concept["resolved_count"]
    return concepts


# Singleton instance
error_analysis_service = ErrorAnalysisService()
