"""
Documentation API

Academic documentation assembled from the roadmap's recorded work. Any
section can be edited; the edit is kept next to the generated text.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pathforge.core.database import get_db
from pathforge.models.documentation import DOCUMENT_SECTIONS
from pathforge.models.user import User
from pathforge.modules.auth.dependencies import get_current_user
from pathforge.schemas.documentation import DocumentationGenerate, SectionEdit, DocumentationResponse
from pathforge.services.data_aggregator import aggregate_project_data
from pathforge.services.documentation_service import documentation_service, section_text

router = APIRouter()


def build_documentation_response(doc, created: bool = False) -> dict:
    return {
        "message": "Documentation generated successfully" if created else "Documentation regenerated successfully",
        "documentation": DocumentationResponse.model_validate(doc).model_dump(mode="json"),
    }


@router.post("/generate")
async def generate_documentation(
    request: DocumentationGenerate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """201 when the document is first created, 200 on regeneration"""
    if not request.roadmap_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="roadmap_id is required")

    doc, created = await documentation_service.generate(db, request.roadmap_id)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=build_documentation_response(doc, created),
    )


@router.get("/roadmap/{roadmap_id}", response_model=DocumentationResponse)
async def get_documentation(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    doc = await documentation_service.get_for_roadmap(db, roadmap_id)
    if not doc:
        data = await aggregate_project_data(db, roadmap_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "detail": "Documentation not yet generated",
                "can_generate": data["can_generate"],
                "completed_phases": data["completed_phases"],
                "total_phases": data["total_phases"],
            },
        )
    return doc


@router.patch("/{doc_id}/edit")
async def edit_section(
    doc_id: str,
    edit: SectionEdit,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    saved = await documentation_service.save_edit(db, doc_id, edit.section, edit.edited_text)
    return {"message": "Section updated", "section": edit.section, "edit": saved}


@router.post("/{doc_id}/regenerate")
async def regenerate_documentation(
    doc_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    existing = await documentation_service.get(db, doc_id)
    doc, _ = await documentation_service.generate(db, existing.roadmap_id)
    return build_documentation_response(doc)


@router.get("/stats/{roadmap_id}")
async def get_documentation_stats(
    roadmap_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    data = await aggregate_project_data(db, roadmap_id)
    doc = await documentation_service.get_for_roadmap(db, roadmap_id)

    return {
        "roadmap_id": roadmap_id,
        "has_documentation": doc is not None,
        "generation_version": doc.generation_version if doc else 0,
        "edited_sections": sorted((doc.user_edits or {}).keys()) if doc else [],
        "word_counts": {s: len(section_text(doc, s).split()) for s in DOCUMENT_SECTIONS} if doc else {},
        "completed_phases": data["completed_phases"],
        "total_phases": data["total_phases"],
        "can_generate": data["can_generate"],
        "is_complete": data["is_complete"],
        "tasks": data["tasks"],
        "prompt_stats": data["prompt_stats"],
        "error_stats": {
            "total": data["error_stats"]["total"],
            "resolved": data["error_stats"]["resolved"],
            "unresolved": data["error_stats"]["unresolved"],
            "by_type": data["error_stats"]["by_type"],
        },
    }
