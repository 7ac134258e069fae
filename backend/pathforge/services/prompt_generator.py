"""
Prompt Generator

Builds the sequence of "Ask AI: ..." prompts shown for a task. The prompts
teach students how to question an assistant rather than handing out code,
and their count depends on the build mode:

- AI_FIRST: 2 prompts (understanding + implementation)
- BALANCED: 4 prompts (understanding, concepts, implementation, validation)
- GUIDED:   7 prompts with comprehension checks, plus a resources card

Tasks whose title/description mention auth, databases, APIs or UI get one
extra specialised prompt (first matching topic only).
"""
import enum
import re
from typing import Any, Dict, List, Optional, Union

from pathforge.models.roadmap import BuildMode


class PromptType(str, enum.Enum):
    UNDERSTANDING = "UNDERSTANDING"
    CONCEPTS = "CONCEPTS"
    PREREQUISITES = "PREREQUISITES"
    IMPLEMENTATION = "IMPLEMENTATION"
    ARCHITECTURE = "ARCHITECTURE"
    VALIDATION = "VALIDATION"
    TROUBLESHOOTING = "TROUBLESHOOTING"
    RESOURCES = "RESOURCES"
    SECURITY = "SECURITY"
    DATABASE = "DATABASE"
    API_DESIGN = "API_DESIGN"
    UX = "UX"


Prompt = Dict[str, Any]


def _prompt(
    step: Union[int, float],
    prompt_type: PromptType,
    icon: str,
    text: str,
    description: str,
    why_ask_this: Optional[str] = None,
    stage_number: Optional[int] = None,
    checkpoint: bool = False,
    comprehension_check: Optional[str] = None,
    is_resource: bool = False,
) -> Prompt:
    return {
        "step": step,
        "stage_number": stage_number,
        "type": prompt_type.value,
        "icon": icon,
        "prompt": text,
        "description": description,
        "why_ask_this": why_ask_this,
        "checkpoint": checkpoint,
        "comprehension_check": comprehension_check,
        "is_resource": is_resource,
    }


def generate_ai_first_prompts(task) -> List[Prompt]:
    """Two prompts: stages 1+2 and 3+4 folded together"""
    return [
        _prompt(
            1, PromptType.UNDERSTANDING, "💡",
            f"Ask AI: Explain {task.title} and its key requirements for this project.",
            "Understand what needs to be built",
            "Understanding the problem is the first step to solving it. This helps you grasp WHAT you "
            "are building and WHY it matters before diving into code.",
            stage_number=1,
        ),
        _prompt(
            2, PromptType.IMPLEMENTATION, "🔨",
            f"Ask AI: What's the implementation approach for {task.title}? Give me the steps and "
            "testing strategy (not full code).",
            "Get implementation strategy and validation approach",
            "Learning HOW to approach a problem (not just copying code) builds your problem-solving "
            "skills. The testing strategy ensures you can verify your work independently.",
            stage_number=3,
        ),
    ]


def generate_balanced_prompts(task) -> List[Prompt]:
    return [
        _prompt(
            1, PromptType.UNDERSTANDING, "💡",
            f"Ask AI: Explain {task.title} in detail. Why is this feature important and what problem does it solve?",
            "Understand the feature and its purpose",
            'Before writing any code, you need to understand the "why" behind the feature. This question '
            "helps you see the big picture and connect this task to real-world use cases.",
            stage_number=1,
        ),
        _prompt(
            2, PromptType.CONCEPTS, "📚",
            f"Ask AI: What concepts and technologies are involved in {task.title}? Explain each concept briefly.",
            "Learn the underlying concepts",
            "Every feature is built on foundational concepts. Understanding these concepts (not just "
            "copying code) prepares you for technical interviews and helps you adapt when requirements change.",
            stage_number=2,
        ),
        _prompt(
            3, PromptType.IMPLEMENTATION, "🔨",
            f"Ask AI: What are the step-by-step implementation guidelines for {task.title}? Focus on the "
            "approach, not complete code.",
            "Get step-by-step implementation guidance",
            "Learning the implementation strategy (rather than just getting code) teaches you how to break "
            "down complex problems. This skill is crucial for building features from scratch in your career.",
            stage_number=3,
        ),
        _prompt(
            4, PromptType.VALIDATION, "✅",
            f"Ask AI: How do I test and validate {task.title}? What should I check to ensure it works correctly?",
            "Learn how to test and validate",
            'Professional developers must verify their work. Learning to test effectively ensures you can '
            'confidently say "this works" during demos, vivas, and code reviews.',
            stage_number=4,
        ),
    ]


def generate_guided_prompts(task) -> List[Prompt]:
    """Seven prompts with comprehension checks; checkpoints follow the task's flag"""
    has_checkpoint = bool(task.concept_checkpoint)

    prompts = [
        _prompt(
            1, PromptType.UNDERSTANDING, "💡",
            f"Ask AI: Explain {task.title} with real-world examples. How is this used in production applications?",
            "Understand with real-world context",
            "Connecting features to real-world applications helps you understand WHY companies need this "
            "functionality. This context is invaluable during interviews when you explain your project.",
            stage_number=1,
            comprehension_check="Can you explain this feature to a non-technical friend in simple terms?",
        ),
        _prompt(
            2, PromptType.PREREQUISITES, "📖",
            f"Ask AI: What do I need to learn before implementing {task.title}? List the prerequisites and "
            "foundational concepts.",
            "Identify what you need to learn first",
            "Identifying knowledge gaps BEFORE coding prevents frustration and wasted time. This prompt "
            "helps you learn strategically, not randomly.",
            stage_number=2,
            checkpoint=has_checkpoint,
            comprehension_check="Do you understand all the prerequisite concepts, or do you need to study some basics first?",
        ),
        _prompt(
            3, PromptType.CONCEPTS, "📚",
            f"Ask AI: Break down all the concepts involved in {task.title}. Explain each concept with simple examples.",
            "Deep dive into concepts",
            "Mastering underlying concepts (like authentication, state management, etc.) makes you a "
            "stronger developer. These concepts apply across multiple projects, not just this one.",
            stage_number=2,
            comprehension_check="Can you explain each concept without looking at notes?",
        ),
        _prompt(
            4, PromptType.ARCHITECTURE, "🏗️",
            f"Ask AI: How should I structure and organize the code for {task.title}? What files and folders do I need?",
            "Plan the code structure",
            "Good architecture makes code maintainable and scalable. Planning structure before coding "
            "prevents messy, hard-to-debug code that will embarrass you during code reviews.",
            stage_number=3,
            comprehension_check="Can you draw a simple diagram of how your code will be organized?",
        ),
        _prompt(
            5, PromptType.IMPLEMENTATION, "🔨",
            f"Ask AI: Break down {task.title} into very small implementation steps. What should I build "
            "first, second, third, etc.?",
            "Get micro-step implementation plan",
            "Breaking big tasks into micro-steps is THE skill that separates junior from senior developers. "
            "This approach reduces overwhelm and helps you make steady, confident progress.",
            stage_number=3,
            checkpoint=has_checkpoint,
            comprehension_check="Can you explain what you will build in each step and why that order makes sense?",
        ),
        _prompt(
            6, PromptType.TROUBLESHOOTING, "🔧",
            f"Ask AI: What are common mistakes when implementing {task.title}? How can I avoid them and debug issues?",
            "Learn common pitfalls and debugging",
            "Learning from others' mistakes is faster than making them yourself. This proactive debugging "
            "mindset will save you hours of frustration and late-night coding sessions.",
            stage_number=3,
            comprehension_check="Do you know what to check first if something goes wrong?",
        ),
        _prompt(
            7, PromptType.VALIDATION, "✅",
            f"Ask AI: What is the complete testing strategy for {task.title}? How do I ensure it's working "
            "correctly and securely?",
            "Comprehensive testing approach",
            'Thorough testing is your proof of competence. When a professor or interviewer asks "how do '
            'you know it works?", you need a solid answer beyond "I clicked around and it seemed fine."',
            stage_number=4,
            comprehension_check="Can you list 3-5 test cases that would verify your implementation is correct?",
        ),
    ]

    resources = task.learning_resources or []
    if resources:
        prompts.append(_prompt(
            len(prompts) + 1, PromptType.RESOURCES, "📑",
            f"Recommended resources: {', '.join(resources)}",
            "Additional learning materials",
            "These curated resources provide deeper context and alternative explanations that "
            "complement AI-generated answers.",
            is_resource=True,
        ))

    return prompts


def generate_prompts_for_task(task, build_mode) -> List[Prompt]:
    """Base prompt set for a build mode. Unknown modes fall back to BALANCED."""
    if task is None or not build_mode:
        raise ValueError("Task and build_mode are required")

    mode = _coerce_mode(build_mode)
    if mode == BuildMode.AI_FIRST:
        return generate_ai_first_prompts(task)
    if mode == BuildMode.GUIDED:
        return generate_guided_prompts(task)
    return generate_balanced_prompts(task)


def _coerce_mode(build_mode) -> Optional[BuildMode]:
    try:
        return BuildMode(build_mode)
    except ValueError:
        return None


_AUTH_KEYWORDS = ("authentication", "login", "auth")
_DATABASE_KEYWORDS = ("database", "schema", "data model")
_API_KEYWORDS = ("api", "endpoint", "rest")
_UI_KEYWORDS = ("ui", "interface", "component")


def _mentions(text: str, keywords) -> bool:
    return any(re.search(rf"\b{re.escape(word)}(?:s|es)?\b", text) for word in keywords)


def get_custom_prompts_for_task_type(task, build_mode) -> List[Prompt]:
    """
    Prompt set for a task, with one specialised prompt spliced in when the
    task text mentions a known topic. Topics are checked in order auth,
    database, API, UI and only the first match applies.
    """
    prompts = generate_prompts_for_task(task, build_mode)
    mode = _coerce_mode(build_mode)
    task_text = f"{task.title} {task.description or ''}".lower()

    if _mentions(task_text, _AUTH_KEYWORDS):
        if mode == BuildMode.GUIDED:
            prompts.insert(2, _prompt(
                2.5, PromptType.SECURITY, "🔒",
                "Ask AI: What are the security best practices for user authentication? Explain password "
                "hashing, JWT tokens, and session management.",
                "Learn security fundamentals",
                checkpoint=True,
            ))
    elif _mentions(task_text, _DATABASE_KEYWORDS):
        if mode == BuildMode.GUIDED:
            prompts.insert(3, _prompt(
                3.5, PromptType.DATABASE, "🗄️",
                "Ask AI: Explain database normalization (1NF, 2NF, 3NF) with examples. Why is it important?",
                "Understand database design principles",
                checkpoint=True,
            ))
    elif _mentions(task_text, _API_KEYWORDS):
        if mode != BuildMode.AI_FIRST:
            prompts.insert(2, _prompt(
                2.5, PromptType.API_DESIGN, "🌐",
                "Ask AI: What are RESTful API best practices? Explain HTTP methods (GET, POST, PUT, DELETE) "
                "and status codes.",
                "Learn API design principles",
                checkpoint=mode == BuildMode.GUIDED,
            ))
    elif _mentions(task_text, _UI_KEYWORDS):
        if mode == BuildMode.GUIDED:
            prompts.insert(3, _prompt(
                3.5, PromptType.UX, "🎨",
                "Ask AI: What are UI/UX best practices for this component? Explain accessibility and responsiveness.",
                "Learn user experience principles",
                checkpoint=True,
            ))

    return prompts


def required_prompt_steps(prompts: List[Prompt]) -> List[float]:
    """Steps a student must view before completing the task"""
    return [float(p["step"]) for p in prompts if not p["is_resource"]]


def normalize_step(step: Union[int, float]) -> Union[int, float]:
    """2.0 -> 2, 2.5 stays 2.5"""
    step = float(step)
    return int(step) if step.is_integer() else step
