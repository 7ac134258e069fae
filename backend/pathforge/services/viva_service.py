"""
Viva & Interview Preparation Service

Questions are generated per user and category from what the student
actually did: the tasks they worked on (all tasks for a leader, assigned
ones for a member), the errors they resolved and the generated
documentation. Preparation unlocks once 70% of the roadmap's phases are
complete.
"""

import math
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.config import settings
from pathforge.core.exceptions import (
    AIResponseParseError, AIServiceError, QuestionNotFoundError, RoadmapNotFoundError,
    ValidationError, VivaNotEligibleError,
)
from pathforge.core.logging_config import logger
from pathforge.models.error_log import ErrorLog
from pathforge.models.project_suggestion import ProjectSuggestion
from pathforge.models.roadmap import Phase, PhaseStatus, Roadmap, Task
from pathforge.models.team import Team
from pathforge.models.user import User, UserRole
from pathforge.models.viva import (
    ConfidenceLevel, QuestionDifficulty, VivaCategory, VivaPrep, VivaQuestion,
)
from pathforge.services.documentation_service import documentation_service, section_text
from pathforge.services.error_analysis import concept_label
from pathforge.utils.claude_client import claude_client


CATEGORY_DESCRIPTIONS = {
    VivaCategory.PROJECT_OVERVIEW: "questions about what problem the project solves, why they chose it, and its real-world impact",
    VivaCategory.CONCEPTUAL: "questions about core concepts, technologies, and theoretical knowledge used in the project",
    VivaCategory.IMPLEMENTATION: "questions about how features were built, technology choices, and development decisions",
    VivaCategory.ERROR_DEBUGGING: "questions about major errors faced, how they were debugged, and what was learned",
    VivaCategory.FUTURE_SCOPE: "questions about how to improve, scale, or extend the project",
}

ROLE_DESCRIPTIONS = {
    UserRole.LEADER: "questions about architecture decisions, task distribution, and team leadership",
    UserRole.MEMBER: "questions about assigned tasks, implementation challenges, and collaboration",
}


def parse_category(value) -> VivaCategory:
    try:
        return VivaCategory(value)
    except ValueError:
        raise ValidationError(f"Invalid category: {value}", field="category")


def parse_confidence(value) -> ConfidenceLevel:
    try:
        return ConfidenceLevel(value)
    except ValueError:
        raise ValidationError("Invalid confidence level", field="confidence_level")


def compute_eligibility(total_phases: int, completed_phases: int) -> Dict[str, Any]:
    """Unlock at VIVA_ELIGIBILITY_THRESHOLD percent of phases; full mode at 100%"""
    threshold = settings.VIVA_ELIGIBILITY_THRESHOLD
    if total_phases == 0:
        return {
            "eligible": False,
            "full_mode_unlocked": False,
            "completion_percentage": 0,
            "total_phases": 0,
            "completed_phases": 0,
            "message": "No phases found for this roadmap",
        }

    percentage = int(math.floor(completed_phases / total_phases * 100 + 0.5))
    eligible = percentage >= threshold

    if not eligible:
        remaining = math.ceil(total_phases * threshold / 100) - completed_phases
        message = f"Complete {remaining} more phases to unlock Viva Preparation"
    elif percentage == 100:
        message = "Full Interview Mode Unlocked!"
    else:
        message = "Partial Mode Active - Complete all phases for full access"

    return {
        "eligible": eligible,
        "full_mode_unlocked": percentage == 100,
        "completion_percentage": percentage,
        "total_phases": total_phases,
        "completed_phases": completed_phases,
        "message": message,
    }


def _answer(simple: str, key_points: List[str], checking: str, mistake: str) -> Dict[str, Any]:
    return {
        "simple_answer": simple,
        "key_points": key_points,
        "interviewer_checking": checking,
        "common_mistake": mistake,
    }


def _source(task_ids=None, error_ids=None, phase_ids=None, sections=None) -> Dict[str, List[str]]:
    return {
        "task_ids": list(task_ids or []),
        "error_ids": list(error_ids or []),
        "phase_ids": list(phase_ids or []),
        "document_sections": list(sections or []),
    }


def get_template_questions(category: VivaCategory, context: Dict[str, Any]) -> List[Dict[str, Any]]:
    project = context["project"]
    title = project["title"]
    domain = project["domain"] or "software development"
    tasks = context["tasks"]
    errors = context["errors"]

    if category == VivaCategory.PROJECT_OVERVIEW:
        return [
            {
                "question": f"What problem does {title} solve?",
                "answer": _answer(
                    f"{title} addresses {project['problem_statement'] or 'a specific real-world challenge'} by providing a systematic solution.",
                    ["Identify the core problem", "Explain who benefits from the solution", "Describe the real-world impact"],
                    "Whether you understand the project's purpose and value",
                    "Giving technical details instead of focusing on the problem and solution",
                ),
                "source_data": _source(sections=["abstract"]),
                "difficulty": QuestionDifficulty.BASIC,
            },
            {
                "question": "Why did you choose this project?",
                "answer": _answer(
                    f"I chose this project because it aligns with {domain} and has practical applications that interest me.",
                    ["Personal interest and motivation", "Learning objectives", "Career relevance"],
                    "Your genuine interest and thoughtfulness in project selection",
                    'Saying "it was easy" or "my friend suggested it"',
                ),
                "source_data": _source(sections=["problem_statement"]),
                "difficulty": QuestionDifficulty.BASIC,
            },
        ]

    if category == VivaCategory.CONCEPTUAL:
        return [
            {
                "question": f"What are the main concepts used in {title}?",
                "answer": _answer(
                    f"The project uses core concepts from {domain} including data structures, algorithms, and system design patterns.",
                    ["List 3-4 key technical concepts", "Explain why each is important", "Show how they work together"],
                    "Your understanding of fundamental concepts",
                    "Just listing technologies without explaining the concepts",
                ),
                "source_data": _source(sections=["methodology"]),
                "difficulty": QuestionDifficulty.INTERMEDIATE,
            },
        ]

    if category == VivaCategory.IMPLEMENTATION:
        return [
            {
                "question": f"How did you implement the core functionality of {title}?",
                "answer": _answer(
                    "I broke down the functionality into modules, implemented each component, and integrated them systematically.",
                    ["Modular architecture approach", "Key implementation decisions", "Integration strategy"],
                    "Your ability to explain technical implementation",
                    'Being too vague or saying "I just followed a tutorial"',
                ),
                "source_data": _source(task_ids=[t["id"] for t in tasks[:3]], sections=["implementation"]),
                "difficulty": QuestionDifficulty.INTERMEDIATE,
            },
        ]

    if category == VivaCategory.ERROR_DEBUGGING:
        if not errors:
            return []
        first = errors[0]
        return [
            {
                "question": "What was the most challenging error you faced and how did you solve it?",
                "answer": _answer(
                    f"I encountered a {first['error_type'].lower()} error related to {first['concept'] or 'data handling'}. "
                    "I debugged it by analyzing the error, understanding the concept, and fixing the root cause.",
                    ["Describe the error clearly", "Explain debugging process", "Share what you learned"],
                    "Your problem-solving ability and learning from mistakes",
                    "Saying you had no errors or always asked someone else",
                ),
                "source_data": _source(error_ids=[first["id"]]),
                "difficulty": QuestionDifficulty.ADVANCED,
            },
        ]

    if category == VivaCategory.ROLE_SPECIFIC:
        if context["user"]["role"] == UserRole.LEADER:
            return [
                {
                    "question": "How did you distribute tasks among team members?",
                    "answer": _answer(
                        "I analyzed each member's strengths, divided the project into modules, and assigned tasks based on skill level and interest.",
                        ["Assessment of team capabilities", "Fair distribution strategy", "Monitoring and support approach"],
                        "Your leadership and team management skills",
                        "Saying you did everything yourself",
                    ),
                    "source_data": _source(),
                    "difficulty": QuestionDifficulty.INTERMEDIATE,
                },
            ]
        return [
            {
                "question": "What was your main contribution to the project?",
                "answer": _answer(
                    f"I was responsible for {tasks[0]['title'] if tasks else 'specific components'}, which I implemented successfully.",
                    ["Specific tasks assigned to you", "Your implementation approach", "Challenges you overcame"],
                    "Your individual contribution and ownership",
                    "Taking credit for the entire project or being too modest",
                ),
                "source_data": _source(task_ids=[t["id"] for t in tasks[:1]]),
                "difficulty": QuestionDifficulty.BASIC,
            },
        ]

    if category == VivaCategory.FUTURE_SCOPE:
        return [
            {
                "question": f"How would you improve or scale {title}?",
                "answer": _answer(
                    "I would add features like advanced analytics, improve performance, and make it production-ready with better error handling.",
                    ["Additional features to add", "Performance optimizations", "Scalability improvements"],
                    "Your forward-thinking and understanding of limitations",
                    "Saying the project is perfect or having no ideas",
                ),
                "source_data": _source(sections=["conclusion"]),
                "difficulty": QuestionDifficulty.ADVANCED,
            },
        ]

    return []


def build_question_prompt(category: VivaCategory, context: Dict[str, Any], count: int) -> str:
    role = context["user"]["role"]
    description = ROLE_DESCRIPTIONS[role] if category == VivaCategory.ROLE_SPECIFIC else CATEGORY_DESCRIPTIONS[category]
    tasks_info = "\n".join(f"- {t['title']} ({t['status']}): {t['description'][:100]}" for t in context["tasks"])
    errors_info = "\n".join(f"- {e['error_type']}: {e['concept']}" for e in context["errors"])
    abstract = (context.get("documentation") or {}).get("abstract")

    return f"""You are an expert interviewer preparing viva questions for a student who built a real project.

Project Details:
- Title: {context['project']['title']}
- Domain: {context['project']['domain']}
- Description: {context['project']['problem_statement']}
- Build Mode: {context['roadmap']['build_mode'].value}

Student Role: {role.value}
Academic Year: {context['user']['academic_year'] or 'Unknown'}

Tasks Worked On:
{tasks_info or 'No specific tasks listed'}

Errors Encountered & Resolved:
{errors_info or 'No errors recorded'}
{f"Project Abstract:{chr(10)}{abstract}{chr(10)}" if abstract else ""}
Generate {count} {description}.

Questions MUST be based on what the student actually did (the tasks and errors above).
No generic questions that could apply to any project.

For each question, provide:

[QUESTION]
[SIMPLE_ANSWER]
A confident, student-friendly answer (2-3 sentences max)
[KEY_POINTS]
- point
[INTERVIEWER_CHECKING]
[COMMON_MISTAKE]
[SOURCE]
Which task or error this question came from
[DIFFICULTY]
BASIC, INTERMEDIATE, or ADVANCED

Separate questions with "---"."""


_QUESTION_FIELDS = ["QUESTION", "SIMPLE_ANSWER", "KEY_POINTS", "INTERVIEWER_CHECKING", "COMMON_MISTAKE", "SOURCE", "DIFFICULTY"]


def _extract(block: str, field: str) -> Optional[str]:
    following = _QUESTION_FIELDS[_QUESTION_FIELDS.index(field) + 1:]
    stop = "|".join(re.escape(f"[{f}]") for f in following)
    pattern = rf"\[{field}\]([\s\S]*?)(?={stop}|$)" if stop else rf"\[{field}\]([\s\S]*)$"
    match = re.search(pattern, block, re.IGNORECASE)
    return match.group(1).strip() if match else None


def parse_questions_from_ai(response: str, count: int) -> List[Dict[str, Any]]:
    questions = []
    for block in (b for b in response.split("---") if b.strip()):
        question = _extract(block, "QUESTION")
        simple = _extract(block, "SIMPLE_ANSWER")
        if not question or not simple:
            continue

        key_points = [
            line.strip().lstrip("-").strip()
            for line in (_extract(block, "KEY_POINTS") or "").splitlines()
            if line.strip().startswith("-")
        ]
        source = _extract(block, "SOURCE")
        difficulty = (_extract(block, "DIFFICULTY") or "").upper()

        questions.append({
            "question": question,
            "answer": _answer(
                simple,
                key_points or ["Review the project implementation"],
                _extract(block, "INTERVIEWER_CHECKING") or "Understanding of the concept",
                _extract(block, "COMMON_MISTAKE") or "Avoid giving vague or memorized answers",
            ),
            "source_data": _source(sections=[source] if source else []),
            "difficulty": QuestionDifficulty(difficulty) if difficulty in QuestionDifficulty.__members__ else QuestionDifficulty.INTERMEDIATE,
        })

    if not questions:
        raise AIResponseParseError("No questions found in AI response")
    return questions[:count]


def _prep_summary(prep: Optional[VivaPrep]) -> Dict[str, Any]:
    if not prep:
        return {
            "confidence_level": ConfidenceLevel.NOT_ATTEMPTED.value,
            "practice_count": 0,
            "marked_for_revision": False,
            "last_practiced_at": None,
            "notes": "",
        }
    return {
        "confidence_level": prep.confidence_level.value,
        "practice_count": prep.practice_count,
        "marked_for_revision": prep.marked_for_revision,
        "last_practiced_at": prep.last_practiced_at,
        "notes": prep.notes or "",
    }


def question_with_prep(question: VivaQuestion, prep: Optional[VivaPrep]) -> Dict[str, Any]:
    return {
        "id": question.id,
        "roadmap_id": question.roadmap_id,
        "category": question.category.value,
        "question": question.question,
        "answer": question.answer,
        "source_data": question.source_data,
        "difficulty": question.difficulty.value,
        "build_mode": question.build_mode.value,
        "user_role": question.user_role.value,
        "created_at": question.created_at,
        "prep_data": _prep_summary(prep),
    }


class VivaService:
    """Eligibility, question generation and practice tracking"""

    async def check_eligibility(self, db: AsyncSession, roadmap_id: str) -> Dict[str, Any]:
        result = await db.execute(select(Phase.status).where(Phase.roadmap_id == str(roadmap_id)))
        statuses = list(result.scalars().all())
        completed = sum(1 for s in statuses if s == PhaseStatus.COMPLETED)
        return compute_eligibility(len(statuses), completed)

    async def ensure_eligible(self, db: AsyncSession, roadmap_id: str) -> Dict[str, Any]:
        eligibility = await self.check_eligibility(db, roadmap_id)
        if not eligibility["eligible"]:
            raise VivaNotEligibleError("Viva preparation not yet unlocked", eligibility)
        return eligibility

    async def build_context(self, db: AsyncSession, roadmap_id: str, user: User) -> Dict[str, Any]:
        result = await db.execute(select(Roadmap).where(Roadmap.id == str(roadmap_id)))
        roadmap = result.scalar_one_or_none()
        if not roadmap:
            raise RoadmapNotFoundError(roadmap_id)

        project = None
        if roadmap.project_id:
            project_result = await db.execute(
                select(ProjectSuggestion).where(ProjectSuggestion.id == roadmap.project_id)
            )
            project = project_result.scalar_one_or_none()
        team_result = await db.execute(select(Team).where(Team.id == roadmap.team_id))
        team = team_result.scalar_one_or_none()

        task_query = (
            select(Task)
            .join(Phase, Task.phase_id == Phase.id)
            .where(Phase.roadmap_id == roadmap.id)
            .order_by(Phase.order, Task.order)
        )
        if user.role != UserRole.LEADER:
            task_query = task_query.where(Task.assigned_to == user.id)
        tasks = list((await db.execute(task_query)).scalars().all())

        all_task_ids = select(Task.id).join(Phase, Task.phase_id == Phase.id).where(Phase.roadmap_id == roadmap.id)
        error_result = await db.execute(
            select(ErrorLog)
            .where(ErrorLog.user_id == user.id, ErrorLog.resolved.is_(True), ErrorLog.task_id.in_(all_task_ids))
            .order_by(ErrorLog.created_at.desc())
        )
        errors = list(error_result.scalars().all())

        doc = await documentation_service.get_for_roadmap(db, roadmap.id)

        return {
            "project": {
                "title": (project.title if project else None) or (team.project_title if team else None) or "Unknown Project",
                "domain": project.domain if project else "",
                "problem_statement": project.problem_statement if project else "",
                "interview_impact_score": project.interview_impact_score if project else None,
            },
            "roadmap": {"id": roadmap.id, "build_mode": roadmap.build_mode, "status": roadmap.status.value},
            "user": {"id": user.id, "role": user.role, "academic_year": user.academic_year.value if user.academic_year else None},
            "tasks": [
                {
                    "id": t.id,
                    "title": t.title,
                    "description": t.description,
                    "status": t.status.value,
                    "difficulty": t.difficulty.value,
                }
                for t in tasks
            ],
            "errors": [
                {
                    "id": e.id,
                    "error_type": e.error_type.value,
                    "error_input": e.error_input,
                    "concept": concept_label(e.concept_involved) if e.concept_involved else "",
                }
                for e in errors
            ],
            "documentation": {
                "abstract": section_text(doc, "abstract"),
                "problem_statement": section_text(doc, "problem_statement"),
                "methodology": section_text(doc, "methodology"),
            } if doc else None,
        }

    async def _existing_questions(self, db: AsyncSession, roadmap_id: str, user_id: str,
                                  category: Optional[VivaCategory] = None) -> List[VivaQuestion]:
        query = select(VivaQuestion).where(
            VivaQuestion.roadmap_id == str(roadmap_id), VivaQuestion.user_id == str(user_id)
        )
        if category:
            query = query.where(VivaQuestion.category == category)
        result = await db.execute(query.order_by(VivaQuestion.created_at.desc()))
        return list(result.scalars().all())

    async def generate_questions(self, db: AsyncSession, roadmap_id: str, user: User,
                                 category, count: int = None) -> List[VivaQuestion]:
        """
        Questions for one category, saved per user. A question whose text
        already exists for the user and category is reused instead of saved
        again.
        """
        category = parse_category(category)
        count = count or settings.VIVA_DEFAULT_QUESTION_COUNT
        context = await self.build_context(db, roadmap_id, user)

        existing = await self._existing_questions(db, roadmap_id, user.id, category)
        by_text = {q.question: q for q in existing}

        candidates: List[Dict[str, Any]] = []
        if claude_client.is_configured() and not (category == VivaCategory.ERROR_DEBUGGING and not context["errors"]):
            if len(existing) >= count:
                return existing[:count]
            try:
                response = await claude_client.generate(
                    prompt=build_question_prompt(category, context, count),
                    model="haiku",
                )
                candidates = parse_questions_from_ai(response["content"], count)
            except AIServiceError as e:
                logger.warning(f"AI viva generation failed for {category.value}, using templates: {e}")

        if not candidates:
            candidates = get_template_questions(category, context)[:count]

        questions = []
        for candidate in candidates:
            question = by_text.get(candidate["question"])
            if not question:
                question = VivaQuestion(
                    roadmap_id=context["roadmap"]["id"],
                    user_id=user.id,
                    category=category,
                    question=candidate["question"],
                    answer=candidate["answer"],
                    source_data=candidate["source_data"],
                    difficulty=candidate["difficulty"],
                    build_mode=context["roadmap"]["build_mode"],
                    user_role=user.role,
                )
                db.add(question)
                by_text[question.question] = question
            questions.append(question)

        await db.flush()
        logger.info(f"Viva questions ready for user {user.id}: {category.value} x{len(questions)}")
        return questions

    async def _prep_by_question(self, db: AsyncSession, user_id: str, question_ids: List[str]) -> Dict[str, VivaPrep]:
        if not question_ids:
            return {}
        result = await db.execute(
            select(VivaPrep).where(VivaPrep.user_id == str(user_id), VivaPrep.question_id.in_(question_ids))
        )
        return {p.question_id: p for p in result.scalars().all()}

    async def get_questions_by_category(self, db: AsyncSession, roadmap_id: str, user: User, category=None,
                                        confidence_level: Optional[str] = None,
                                        marked_for_revision: bool = False) -> List[Dict[str, Any]]:
        """Saved questions, generating a default batch for every requested category that has none"""
        categories = [parse_category(category)] if category else list(VivaCategory)
        await self.ensure_eligible(db, roadmap_id)

        questions: List[VivaQuestion] = []
        for item in categories:
            existing = await self._existing_questions(db, roadmap_id, user.id, item)
            if not existing:
                existing = await self.generate_questions(
                    db, roadmap_id, user, item, settings.VIVA_DEFAULT_QUESTION_COUNT
                )
            questions.extend(existing)

        prep = await self._prep_by_question(db, user.id, [q.id for q in questions])
        items = [question_with_prep(q, prep.get(q.id)) for q in questions]

        if confidence_level:
            level = parse_confidence(confidence_level)
            items = [i for i in items if i["prep_data"]["confidence_level"] == level.value]
        if marked_for_revision:
            items = [i for i in items if i["prep_data"]["marked_for_revision"]]
        return items

    async def get_question(self, db: AsyncSession, question_id: str, user: User) -> Dict[str, Any]:
        result = await db.execute(
            select(VivaQuestion).where(VivaQuestion.id == str(question_id), VivaQuestion.user_id == user.id)
        )
        question = result.scalar_one_or_none()
        if not question:
            raise QuestionNotFoundError(question_id)
        prep = await self._prep_by_question(db, user.id, [question.id])
        return question_with_prep(question, prep.get(question.id))

    async def update_confidence(self, db: AsyncSession, user: User, question_id: str,
                                confidence_level, notes: str = "") -> VivaPrep:
        level = parse_confidence(confidence_level)

        result = await db.execute(
            select(VivaQuestion.id).where(VivaQuestion.id == str(question_id), VivaQuestion.user_id == user.id)
        )
        if not result.scalar_one_or_none():
            raise QuestionNotFoundError(question_id)

        prep_result = await db.execute(
            select(VivaPrep).where(VivaPrep.user_id == user.id, VivaPrep.question_id == str(question_id))
        )
        prep = prep_result.scalar_one_or_none()
        if not prep:
            prep = VivaPrep(user_id=user.id, question_id=str(question_id), practice_count=0)
            db.add(prep)

        prep.confidence_level = level
        prep.marked_for_revision = level == ConfidenceLevel.NEEDS_REVISION
        prep.notes = notes or ""
        prep.last_practiced_at = datetime.utcnow()
        prep.practice_count = (prep.practice_count or 0) + 1
        await db.flush()
        return prep

    async def get_revision_list(self, db: AsyncSession, roadmap_id: str, user: User) -> List[Dict[str, Any]]:
        await self.ensure_eligible(db, roadmap_id)
        result = await db.execute(
            select(VivaQuestion, VivaPrep)
            .join(VivaPrep, VivaPrep.question_id == VivaQuestion.id)
            .where(
                VivaQuestion.roadmap_id == str(roadmap_id),
                VivaQuestion.user_id == user.id,
                VivaPrep.user_id == user.id,
                VivaPrep.marked_for_revision.is_(True),
            )
            .order_by(VivaQuestion.created_at)
        )
        return [question_with_prep(q, p) for q, p in result.all()]

    async def get_statistics(self, db: AsyncSession, roadmap_id: str, user: User) -> Dict[str, Any]:
        questions = await self._existing_questions(db, roadmap_id, user.id)
        prep = await self._prep_by_question(db, user.id, [q.id for q in questions])
        records = list(prep.values())

        by_category = {}
        for category in VivaCategory:
            ids = {q.id for q in questions if q.category == category}
            category_prep = [p for p in records if p.question_id in ids]
            by_category[category.value] = {
                "total": len(ids),
                "confident": sum(1 for p in category_prep if p.confidence_level == ConfidenceLevel.CONFIDENT),
                "needs_revision": sum(1 for p in category_prep if p.confidence_level == ConfidenceLevel.NEEDS_REVISION),
            }

        return {
            "total_questions": len(questions),
            "practiced": sum(1 for p in records if p.practice_count > 0),
            "confident": sum(1 for p in records if p.confidence_level == ConfidenceLevel.CONFIDENT),
            "needs_revision": sum(1 for p in records if p.confidence_level == ConfidenceLevel.NEEDS_REVISION),
            "not_attempted": len(questions) - len(records),
            "by_category": by_category,
        }


# Singleton instance
viva_service = VivaService()
