"""Artifact comparison - baseline vs. student work through the generation client."""

import asyncio
import logging

from planassist.config import Settings, get_settings
from planassist.extraction.extractor import (
    FALLBACK_MIME_TYPE,
    ExtractionError,
    extract_artifact,
    guess_mime_type,
    normalize_mime_type,
)
from planassist.llm.client import LLMClient
from planassist.models.artifact import (
    Artifact,
    ComparisonReport,
    ComparisonRequest,
    UploadedArtifact,
)
from planassist.prompts.comparison import build_comparison_messages

logger = logging.getLogger(__name__)


class ArtifactReadError(Exception):
    """One of the two uploads could not be turned into an artifact."""

    def __init__(self, role: str, error: ExtractionError) -> None:
        self.role = role
        self.format_name = error.format_name
        super().__init__(f"Could not read {role} file ({error.format_name})")


def resolve_mime_type(upload: UploadedArtifact) -> str:
    """Declared MIME type, or one guessed from the filename when generic."""
    mime_type = normalize_mime_type(upload.mime_type or "")
    if not mime_type or mime_type == FALLBACK_MIME_TYPE:
        return guess_mime_type(upload.filename)
    return mime_type


async def _extract(role: str, upload: UploadedArtifact) -> Artifact:
    try:
        return await asyncio.to_thread(extract_artifact, upload.data, resolve_mime_type(upload))
    except ExtractionError as e:
        raise ArtifactReadError(role, e) from e


async def compare_artifacts(
    request: ComparisonRequest,
    baseline: UploadedArtifact,
    compare: UploadedArtifact,
    *,
    llm: LLMClient,
    settings: Settings | None = None,
) -> ComparisonReport:
    """Extract both uploads and ask the model for a grounded comparison.

    The two extractions share no state and run concurrently; the single
    generation call follows them.

    Raises:
        UnsupportedMimeTypeError: An upload's type is outside the whitelist
        ArtifactReadError: An upload could not be read
        GenerationError: The generation call failed (not retried)
    """
    settings = settings or get_settings()

    baseline_artifact, compare_artifact = await asyncio.gather(
        _extract("baseline", baseline),
        _extract("compare", compare),
        return_exceptions=True,
    )

    # Baseline errors are raised first; a second failure is only logged
    if isinstance(baseline_artifact, BaseException):
        if isinstance(compare_artifact, BaseException):
            logger.warning(f"Compare artifact also failed: {compare_artifact}")
        raise baseline_artifact
    if isinstance(compare_artifact, BaseException):
        raise compare_artifact

    messages = build_comparison_messages(
        student_name=request.student_name,
        plan_type_code=request.plan_type_code,
        artifact_date=request.artifact_date.isoformat(),
        description=request.description,
        baseline=baseline_artifact,
        compare=compare_artifact,
    )

    logger.info(
        f"Comparing artifacts ({baseline_artifact.kind} vs {compare_artifact.kind}) "
        f"for plan type {request.plan_type_code}"
    )

    analysis_text = await llm.generate(
        operation="compare",
        messages=messages,
        temperature=settings.compare_temperature,
        max_tokens=settings.generation_max_tokens,
    )

    return ComparisonReport(
        analysis_text=analysis_text,
        baseline_kind=baseline_artifact.kind,
        compare_kind=compare_artifact.kind,
        generation_source=llm.source,
    )
