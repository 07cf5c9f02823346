"""Models package - re-exports for convenience."""

from planassist.models.artifact import (
    Artifact,
    ComparisonReport,
    ComparisonRequest,
    ImageArtifact,
    TextArtifact,
    UploadedArtifact,
)
from planassist.models.common import GradeBand, IngestionStatus, PlanTypeCode
from planassist.models.draft import (
    DraftRequest,
    GeneratedDraft,
    NoReferenceMaterial,
    StudentContext,
)
from planassist.models.reference import ChunkQuery, ReferenceChunk

__all__ = [
    "Artifact",
    "ChunkQuery",
    "ComparisonReport",
    "ComparisonRequest",
    "DraftRequest",
    "GeneratedDraft",
    "GradeBand",
    "ImageArtifact",
    "IngestionStatus",
    "NoReferenceMaterial",
    "PlanTypeCode",
    "ReferenceChunk",
    "StudentContext",
    "TextArtifact",
    "UploadedArtifact",
]
