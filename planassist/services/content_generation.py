"""Draft content generation grounded in best-practice reference chunks."""

import logging

from planassist.config import Settings, get_settings
from planassist.llm.client import LLMClient
from planassist.models.common import PlanTypeCode
from planassist.models.draft import DraftRequest, GeneratedDraft, NoReferenceMaterial
from planassist.prompts.draft import build_draft_prompt
from planassist.reference.grade_bands import classify_grade_band
from planassist.reference.retriever import retrieve_reference_context
from planassist.reference.sections import resolve_section_tag
from planassist.reference.store import ReferenceStore

logger = logging.getLogger(__name__)


async def generate_draft(
    request: DraftRequest,
    *,
    store: ReferenceStore,
    llm: LLMClient,
    settings: Settings | None = None,
) -> GeneratedDraft | NoReferenceMaterial:
    """Draft one plan field from retrieved reference examples.

    Flow: resolve section tag (falling back to the caller's section key) ->
    classify grade band -> staged retrieval -> build prompt -> one
    generation call. When retrieval is exhausted the generation client is
    not called and NoReferenceMaterial is returned.

    Raises:
        GenerationError: The generation call failed (not retried)
    """
    settings = settings or get_settings()

    section_tag = (
        resolve_section_tag(request.plan_type_code, request.field_key) or request.section_key
    )
    student = request.student_context
    grade_band = classify_grade_band(student.grade if student else None)

    retrieval = await retrieve_reference_context(
        store,
        plan_type_code=request.plan_type_code,
        section_tag=section_tag,
        jurisdiction_id=request.jurisdiction_id,
        grade_band=grade_band,
        limit=settings.reference_chunk_limit,
    )

    if retrieval.is_exhausted:
        logger.info(
            f"No reference material for {request.plan_type_code.value}/{section_tag}; "
            "skipping generation"
        )
        return NoReferenceMaterial(plan_type_code=request.plan_type_code, section_tag=section_tag)

    # Provenance and prompt come from the same list
    chunks = list(retrieval.chunks)

    prompt = build_draft_prompt(
        plan_type_code=request.plan_type_code,
        section_tag=section_tag,
        field_key=request.field_key,
        chunks=chunks,
        student_context=student,
        user_prompt=request.user_prompt,
    )

    text = await llm.generate(
        operation="draft",
        messages=[{"role": "user", "content": prompt}],
        temperature=settings.draft_temperature,
        max_tokens=settings.generation_max_tokens,
    )

    return GeneratedDraft(
        text=text.strip(),
        source_chunk_ids=[chunk.chunk_id for chunk in chunks],
        section_tag=section_tag,
        retrieval_stage=retrieval.stage.value,
        generation_source=llm.source,
    )


def get_generatable_sections(store: ReferenceStore, plan_type_code: PlanTypeCode | str) -> list[str]:
    """Section tags drafting can be offered for on a plan type."""
    return store.section_tags(plan_type_code)


async def check_generation_availability(
    store: ReferenceStore, plan_type_code: PlanTypeCode
) -> dict[str, bool]:
    """Map each section tag to whether any retrievable reference chunk exists."""
    counts = await store.count_chunks_by_section(plan_type_code)
    return {
        tag: counts.get(tag, 0) > 0 for tag in get_generatable_sections(store, plan_type_code)
    }
