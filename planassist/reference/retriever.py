"""Context retriever - staged reference lookup with graceful degradation.

Stages run in order and stop at the first one that yields chunks:

1. exact: resolved section tag, narrowed by jurisdiction and grade band
2. relaxed: same tag, jurisdiction dropped first, then grade band
3. generic: topic-level tag (prefix before the first underscore), no narrowing
4. exhausted: nothing usable; callers must not invoke the generation client

The stages are sequential because each decision depends on the previous
result. Chunks are only ever those returned by the store.
"""

from enum import Enum

from pydantic import BaseModel

from planassist.models.common import GradeBand, PlanTypeCode
from planassist.models.reference import ChunkQuery, ReferenceChunk
from planassist.reference.sections import generic_section_tag
from planassist.reference.store import ReferenceStore
from planassist.utils.logging import content_logger
from planassist.utils.metrics import content_metrics

DEFAULT_CHUNK_LIMIT = 3


class RetrievalStage(str, Enum):
    """Fallback stage that produced (or failed to produce) the chunks."""

    exact = "exact"
    relaxed = "relaxed"
    generic = "generic"
    exhausted = "exhausted"


class RetrievalResult(BaseModel):
    """Outcome of a staged retrieval."""

    stage: RetrievalStage
    section_tag: str
    chunks: list[ReferenceChunk]

    @property
    def is_exhausted(self) -> bool:
        return self.stage is RetrievalStage.exhausted


async def retrieve_exact(
    store: ReferenceStore,
    *,
    plan_type_code: PlanTypeCode,
    section_tag: str,
    jurisdiction_id: str | None = None,
    grade_band: GradeBand | None = None,
    limit: int = DEFAULT_CHUNK_LIMIT,
) -> list[ReferenceChunk]:
    """Stage 1: full-context query on the resolved section tag."""
    chunks = await store.query_chunks(
        ChunkQuery(
            plan_type_code=plan_type_code,
            section_tag=section_tag,
            jurisdiction_id=jurisdiction_id,
            grade_band=grade_band,
            limit=limit,
        )
    )
    content_logger.log_retrieval(
        plan_type=plan_type_code.value,
        section_tag=section_tag,
        stage=RetrievalStage.exact.value,
        chunk_count=len(chunks),
        jurisdiction_id=jurisdiction_id,
        grade_band=grade_band.value if grade_band else None,
    )
    return chunks


async def retrieve_relaxed(
    store: ReferenceStore,
    *,
    plan_type_code: PlanTypeCode,
    section_tag: str,
    jurisdiction_id: str | None = None,
    grade_band: GradeBand | None = None,
    limit: int = DEFAULT_CHUNK_LIMIT,
) -> list[ReferenceChunk]:
    """Stage 2: same section tag, narrowing dropped one filter at a time.

    The jurisdiction goes first (grade band kept), then the grade band. A
    step only runs when the filter it drops was set, so a request without
    narrowing skips this stage entirely.
    """
    steps: list[tuple[str | None, GradeBand | None]] = []
    if jurisdiction_id:
        steps.append((None, grade_band))
    if grade_band:
        steps.append((None, None))

    for step_jurisdiction, step_grade_band in steps:
        chunks = await store.query_chunks(
            ChunkQuery(
                plan_type_code=plan_type_code,
                section_tag=section_tag,
                jurisdiction_id=step_jurisdiction,
                grade_band=step_grade_band,
                limit=limit,
            )
        )
        content_logger.log_retrieval(
            plan_type=plan_type_code.value,
            section_tag=section_tag,
            stage=RetrievalStage.relaxed.value,
            chunk_count=len(chunks),
            grade_band=step_grade_band.value if step_grade_band else None,
        )
        if chunks:
            return chunks

    return []


async def retrieve_generic(
    store: ReferenceStore,
    *,
    plan_type_code: PlanTypeCode,
    section_tag: str,
    limit: int = DEFAULT_CHUNK_LIMIT,
) -> tuple[str, list[ReferenceChunk]]:
    """Stage 3: topic-level tag with jurisdiction and grade band dropped.

    Returns:
        (generic_tag, chunks)
    """
    generic_tag = generic_section_tag(section_tag)
    chunks = await store.query_chunks(
        ChunkQuery(plan_type_code=plan_type_code, section_tag=generic_tag, limit=limit)
    )
    content_logger.log_retrieval(
        plan_type=plan_type_code.value,
        section_tag=generic_tag,
        stage=RetrievalStage.generic.value,
        chunk_count=len(chunks),
    )
    return generic_tag, chunks


async def retrieve_reference_context(
    store: ReferenceStore,
    *,
    plan_type_code: PlanTypeCode,
    section_tag: str,
    jurisdiction_id: str | None = None,
    grade_band: GradeBand | None = None,
    limit: int = DEFAULT_CHUNK_LIMIT,
) -> RetrievalResult:
    """Run the exact -> relaxed -> generic -> exhausted fallback sequence.

    Args:
        store: Reference corpus
        plan_type_code: Plan family
        section_tag: Resolved section tag (or the caller's section key)
        jurisdiction_id: Optional jurisdiction narrowing for the exact stage
        grade_band: Optional grade band narrowing for the exact stage
        limit: Maximum chunks per stage

    Returns:
        RetrievalResult; ``section_tag`` is always the tag the caller asked
        for, the generic tag only affects which chunks were found.
    """
    chunks = await retrieve_exact(
        store,
        plan_type_code=plan_type_code,
        section_tag=section_tag,
        jurisdiction_id=jurisdiction_id,
        grade_band=grade_band,
        limit=limit,
    )
    stage = RetrievalStage.exact

    if not chunks:
        chunks = await retrieve_relaxed(
            store,
            plan_type_code=plan_type_code,
            section_tag=section_tag,
            jurisdiction_id=jurisdiction_id,
            grade_band=grade_band,
            limit=limit,
        )
        stage = RetrievalStage.relaxed

    if not chunks:
        _, chunks = await retrieve_generic(
            store, plan_type_code=plan_type_code, section_tag=section_tag, limit=limit
        )
        stage = RetrievalStage.generic

    if not chunks:
        stage = RetrievalStage.exhausted

    content_metrics.inc_retrieval_stage(plan_type_code.value, stage.value)
    return RetrievalResult(stage=stage, section_tag=section_tag, chunks=chunks)
