"""
Documentation Service

Generates the eight academic documentation sections from the aggregated
roadmap data. Each section records which sources it was generated from so
a reader can trace the text back to actual work. Claude writes the prose
when configured; otherwise deterministic templates are used.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.exceptions import AIServiceError, DocumentNotFoundError, ValidationError, WorkflowError
from pathforge.core.logging_config import logger
from pathforge.models.documentation import DOCUMENT_SECTIONS, DocumentGeneration
from pathforge.models.roadmap import BuildMode
from pathforge.services.data_aggregator import aggregate_project_data, find_phase, format_data_for_ai
from pathforge.utils.claude_client import claude_client


DEPTH_LIMITS = {
    BuildMode.AI_FIRST: (150, 250),
    BuildMode.BALANCED: (250, 400),
    BuildMode.GUIDED: (400, 600),
}

SECTION_INSTRUCTIONS = {
    "abstract": """Write an academic abstract that:
- Explains what problem this project solves
- States why it matters in the real world
- Mentions how AI was used responsibly for learning
- Summarizes key achievements""",
    "problem_statement": """Write a clear problem statement that:
- Defines the problem being addressed
- Explains limitations of existing systems
- Justifies why this project is needed
Use data from problem understanding phase tasks.""",
    "methodology": """Describe the phased methodology:
- List each phase chronologically
- Explain what was done in each phase
- Mention task completion status
Format: "Phase 1 - [Name]: [What was accomplished]...\"""",
    "architecture": """Describe the system architecture:
- High-level architectural pattern
- Key components and their roles
- Data flow overview (conceptual, not technical)
Based on system design phase tasks only.""",
    "implementation": """Explain implementation details:
- Technologies chosen and why
- Key features implemented (from completed tasks)
- Conceptual approach (not code)""",
    "error_learning": """Describe the learning journey through errors:
- Common errors and concepts struggled with
- How understanding improved and resolution patterns
- Concepts mastered
Use the actual error log data and keep it reflective.""",
    "results": """Summarize results and outcomes:
- What was successfully completed (from task data)
- Learning outcomes
- Measurable progress (X/Y tasks, phases)""",
    "conclusion": """Write conclusion and future scope:
- Reflect on the learning experience
- Key takeaways specific to the build mode
- Logical future enhancements (from remaining phases/tasks)""",
}


def get_depth_limits(build_mode) -> Tuple[int, int]:
    return DEPTH_LIMITS.get(build_mode, DEPTH_LIMITS[BuildMode.BALANCED])


def _phase_label(phase: Optional[Dict[str, Any]]) -> List[str]:
    return [f"Phase {phase['order']}: {phase['name']}"] if phase else []


def get_generated_from_sources(section: str, data: Dict[str, Any]) -> List[str]:
    """Human-readable list of the records a section was built from"""
    if section == "abstract":
        return [f"Project: {data['project']['title']}"] + [
            f"Phase {p['order']}: {p['name']}" for p in data["phases"][:2]
        ]
    if section == "problem_statement":
        return _phase_label(find_phase(data, "problem", "understanding"))
    if section == "methodology":
        return [f"Phase {p['order']}: {p['name']}" for p in data["phases"]]
    if section == "architecture":
        return _phase_label(find_phase(data, "design", "architecture"))
    if section == "implementation":
        return _phase_label(find_phase(data, "development", "implementation")) + [
            f"{data['tasks']['completed']} completed tasks"
        ]
    if section == "error_learning":
        return [
            f"{data['error_stats']['total']} error logs analyzed",
            f"{len(data['error_stats']['top_concepts'])} key concepts identified",
        ]
    if section == "results":
        return [
            f"{data['completed_phases']} completed phases",
            f"{data['tasks']['completed']}/{data['tasks']['total']} tasks",
        ]
    if section == "conclusion":
        return [f"Build Mode: {data['roadmap']['build_mode'].value}", "Overall project execution data"]
    return []


def _mode_label(build_mode) -> str:
    return build_mode.value.replace("_", " ")


def template_section_text(section: str, data: Dict[str, Any]) -> str:
    project = data["project"]
    domain = project["domain"]
    mode = _mode_label(data["roadmap"]["build_mode"])
    tasks = data["tasks"]
    errors = data["error_stats"]

    if section == "abstract":
        problem = project["problem_statement"] or "a real-world problem identified by the team"
        return (
            f'This {domain} project, titled "{project["title"]}", addresses {problem.rstrip(".")}. '
            f"We completed {data['completed_phases']} out of {data['total_phases']} phases using a {mode} "
            "learning approach. AI assistance was used responsibly for learning guidance, not code generation. "
            f"The system successfully implements {tasks['completed']} features across multiple phases."
        )
    if section == "problem_statement":
        return (
            f"Current systems in the {domain} domain face limitations that this project aims to address. "
            "Through systematic analysis in our problem understanding phase, we identified key challenges "
            "and designed solutions to overcome them. This project demonstrates practical implementation "
            "of solutions to real-world problems."
        )
    if section == "methodology":
        return "\n\n".join(
            f"Phase {p['order']} - {p['name']} ({p['status']}): Completed {len(p['completed_tasks'])}/"
            f"{p['total_tasks']} tasks focusing on {p['description'] or 'key objectives'}."
            for p in data["phases"]
        )
    if section == "architecture":
        return (
            "The system follows a modular architecture design implemented during our design phase. "
            "Key components were identified and structured to ensure scalability and maintainability. "
            "The architecture supports core functionalities while maintaining clean separation of concerns."
        )
    if section == "implementation":
        stack = ", ".join(project["tech_stack"])
        stack_sentence = f" The main technologies were {stack}." if stack else ""
        return (
            f"We implemented {tasks['completed']} features across {data['completed_phases']} phases. "
            f"Technologies were chosen based on project requirements and learning objectives.{stack_sentence} "
            "Each implementation focused on understanding core concepts before execution, ensuring solid "
            "foundational knowledge."
        )
    if section == "error_learning":
        concepts = ", ".join(c["concept"] for c in errors["top_concepts"][:3]) or "none recorded yet"
        return (
            f"During development, we encountered {errors['total']} learning opportunities (errors/confusions), "
            f"of which {errors['resolved']} were resolved through systematic understanding. Key concepts "
            f"mastered include: {concepts}. Each error deepened our understanding and improved "
            "problem-solving skills."
        )
    if section == "results":
        return (
            f"Successfully completed {data['completed_phases']} out of {data['total_phases']} phases, "
            f"delivering {tasks['completed']} functional features. The project demonstrates practical "
            f"application of {domain} concepts. Learning outcomes include mastery of key technologies "
            "and systematic problem-solving approaches."
        )
    if section == "conclusion":
        remaining = "completion of remaining phases and " if data["total_phases"] > data["completed_phases"] else ""
        return (
            f"This project provided hands-on experience with {domain} development. Through the {mode} "
            "learning approach, we gained deep understanding of core concepts. Future enhancements could "
            f"include {remaining}performance optimizations and additional features based on user feedback."
        )
    return "Section to be generated based on project progress."


def _section(text: str, section: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "text": text,
        "generated_from": get_generated_from_sources(section, data),
        "last_updated": datetime.utcnow().isoformat(),
    }


def _section_prompt(section: str, data: Dict[str, Any]) -> str:
    formatted = format_data_for_ai(data, section)
    low, high = get_depth_limits(data["roadmap"]["build_mode"])
    return f"""You are generating the {section.upper()} section for an academic project documentation.

Project Context:
- Title: {formatted['project_title']}
- Domain: {formatted['project_domain']}
- Build Mode: {formatted['build_mode']}
- Phases Completed: {formatted['phases_completed']}/{formatted['total_phases']}

Data to Use (USE ONLY THIS DATA - NO INVENTION):
{json.dumps(formatted, indent=2, default=str)}

Rules:
- Use ONLY the provided data
- Write in academic first-person plural ("We implemented...")
- Write between {low}-{high} words
- If data is insufficient, say "To be completed in [phase name]"

{SECTION_INSTRUCTIONS.get(section, 'Generate this section thoughtfully.')}"""


class DocumentationService:
    """Generate, store and edit roadmap documentation"""

    async def generate_section(self, section: str, data: Dict[str, Any]) -> Dict[str, Any]:
        if claude_client.is_configured():
            try:
                response = await claude_client.generate(
                    prompt=_section_prompt(section, data),
                    model="haiku",
                )
                text = response["content"].strip()
                if text:
                    return _section(text, section, data)
            except AIServiceError as e:
                logger.warning(f"AI generation failed for section {section}, using template: {e}")
        return _section(template_section_text(section, data), section, data)

    async def generate_all_sections(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {section: await self.generate_section(section, data) for section in DOCUMENT_SECTIONS}

    async def get_for_roadmap(self, db: AsyncSession, roadmap_id: str) -> Optional[DocumentGeneration]:
        result = await db.execute(
            select(DocumentGeneration).where(DocumentGeneration.roadmap_id == str(roadmap_id))
        )
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, doc_id: str) -> DocumentGeneration:
        result = await db.execute(select(DocumentGeneration).where(DocumentGeneration.id == str(doc_id)))
        doc = result.scalar_one_or_none()
        if not doc:
            raise DocumentNotFoundError(doc_id)
        return doc

    async def generate(self, db: AsyncSession, roadmap_id: str) -> Tuple[DocumentGeneration, bool]:
        """
        Create or regenerate the document for a roadmap.

        Returns:
            (document, created) - created is False on regeneration

        Raises:
            WorkflowError: no phase has been completed yet
        """
        data = await aggregate_project_data(db, roadmap_id)
        if not data["can_generate"]:
            raise WorkflowError(
                "Complete at least 1 phase before generating documentation",
                details={"completed_phases": data["completed_phases"], "total_phases": data["total_phases"]},
            )

        content = await self.generate_all_sections(data)
        doc = await self.get_for_roadmap(db, roadmap_id)
        created = doc is None

        if created:
            doc = DocumentGeneration(
                project_id=data["project"]["id"],
                roadmap_id=data["roadmap"]["id"],
                team_id=data["team"]["id"],
                build_mode=data["roadmap"]["build_mode"],
                content=content,
                user_edits={},
                generation_version=1,
            )
            db.add(doc)
        else:
            doc.content = content
            doc.last_regenerated_at = datetime.utcnow()
            doc.generation_version = (doc.generation_version or 1) + 1

        doc.phases_completed = data["completed_phases"]
        doc.total_phases = data["total_phases"]
        doc.can_generate = data["can_generate"]
        doc.is_complete = data["is_complete"]
        await db.flush()

        logger.info(
            f"Documentation {'generated' if created else 'regenerated'} for roadmap {roadmap_id} "
            f"(version {doc.generation_version})"
        )
        return doc, created

    async def save_edit(self, db: AsyncSession, doc_id: str, section: str, edited_text: str) -> Dict[str, Any]:
        if section not in DOCUMENT_SECTIONS:
            raise ValidationError("Invalid section name", field="section")

        doc = await self.get(db, doc_id)
        edit = {"edited_text": edited_text, "edited_at": datetime.utcnow().isoformat()}
        doc.user_edits = {**(doc.user_edits or {}), section: edit}
        await db.flush()
        return edit


def section_text(doc: Optional[DocumentGeneration], section: str) -> str:
    """User edit if present, otherwise the generated text"""
    if not doc:
        return ""
    edit = (doc.user_edits or {}).get(section)
    if edit and edit.get("edited_text"):
        return edit["edited_text"]
    return ((doc.content or {}).get(section) or {}).get("text", "")


# Singleton instance
documentation_service = DocumentationService()
