"""Generation endpoints - POST /generation/draft, GET /generation/availability,
GET /generation/reference-preview."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from planassist.api.dependencies import get_reference_store
from planassist.config import Settings, get_settings
from planassist.llm.client import GenerationError, LLMClient, get_llm_client
from planassist.models.common import GradeBand, PlanTypeCode
from planassist.models.draft import DraftRequest, NoReferenceMaterial
from planassist.models.reference import ChunkQuery
from planassist.reference.store import ReferenceStore
from planassist.services.content_generation import check_generation_availability, generate_draft

router = APIRouter(prefix="/generation", tags=["generation"])
logger = logging.getLogger(__name__)

NO_REFERENCE_SUGGESTION = (
    "Ask your administrator to upload best practice documents for this plan type."
)
PREVIEW_CHARS = 200


class DraftBody(BaseModel):
    """Generated draft as returned to the client."""

    text: str
    section_tag: str
    source_chunk_ids: list[str]
    source_count: int
    retrieval_stage: str


class DraftResponse(BaseModel):
    """Response for POST /generation/draft."""

    draft: DraftBody


class AvailabilityResponse(BaseModel):
    """Response for GET /generation/availability."""

    plan_type: PlanTypeCode
    sections: dict[str, bool]


class ReferencePreview(BaseModel):
    """Truncated view of one reference chunk."""

    chunk_id: str
    preview: str
    section_tag: str
    grade_band: GradeBand | None = None


class ReferencePreviewResponse(BaseModel):
    """Response for GET /generation/reference-preview."""

    count: int
    chunks: list[ReferencePreview]


@router.post("/draft", response_model=DraftResponse)
async def create_draft(
    request: DraftRequest,
    store: Annotated[ReferenceStore, Depends(get_reference_store)],
    llm: Annotated[LLMClient, Depends(get_llm_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DraftResponse:
    """Draft one plan field from best-practice reference material.

    Returns:
        Draft text with the chunk ids that grounded it

    Raises:
        HTTPException: 404 when no reference material exists, 502 when
            the generation call fails
    """
    try:
        result = await generate_draft(request, store=store, llm=llm, settings=settings)
    except GenerationError as e:
        logger.error(f"Draft generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate draft",
        ) from e

    if isinstance(result, NoReferenceMaterial):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": result.reason,
                "section_tag": result.section_tag,
                "suggestion": NO_REFERENCE_SUGGESTION,
            },
        )

    return DraftResponse(
        draft=DraftBody(
            text=result.text,
            section_tag=result.section_tag,
            source_chunk_ids=result.source_chunk_ids,
            source_count=len(result.source_chunk_ids),
            retrieval_stage=result.retrieval_stage,
        )
    )


@router.get("/availability", response_model=AvailabilityResponse)
async def generation_availability(
    store: Annotated[ReferenceStore, Depends(get_reference_store)],
    plan_type_code: Annotated[PlanTypeCode, Query()],
) -> AvailabilityResponse:
    """Report which sections of a plan type have reference material."""
    sections = await check_generation_availability(store, plan_type_code)
    return AvailabilityResponse(plan_type=plan_type_code, sections=sections)


@router.get("/reference-preview", response_model=ReferencePreviewResponse)
async def reference_preview(
    store: Annotated[ReferenceStore, Depends(get_reference_store)],
    plan_type_code: Annotated[PlanTypeCode, Query()],
    section_tag: Annotated[str, Query(min_length=1, max_length=64)],
    jurisdiction_id: Annotated[str | None, Query(max_length=64)] = None,
    grade_band: Annotated[GradeBand | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=10)] = 3,
) -> ReferencePreviewResponse:
    """Preview the chunks a single corpus query returns (admin/debug)."""
    chunks = await store.query_chunks(
        ChunkQuery(
            plan_type_code=plan_type_code,
            section_tag=section_tag,
            jurisdiction_id=jurisdiction_id,
            grade_band=grade_band,
            limit=limit,
        )
    )

    previews = [
        ReferencePreview(
            chunk_id=chunk.chunk_id,
            preview=(
                chunk.text
                if len(chunk.text) <= PREVIEW_CHARS
                else chunk.text[:PREVIEW_CHARS] + "..."
            ),
            section_tag=chunk.section_tag,
            grade_band=chunk.grade_band,
        )
        for chunk in chunks
    ]

    return ReferencePreviewResponse(count=len(previews), chunks=previews)
