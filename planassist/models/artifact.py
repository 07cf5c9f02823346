"""Artifact comparison domain models."""

from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class TextArtifact(BaseModel):
    """Artifact whose text was extracted from a document."""

    model_config = {"frozen": True}

    kind: Literal["text"] = "text"
    content: str


class ImageArtifact(BaseModel):
    """Artifact submitted to the model as an image part."""

    model_config = {"frozen": True}

    kind: Literal["image"] = "image"
    data: bytes
    mime_type: str


Artifact = Annotated[TextArtifact | ImageArtifact, Field(discriminator="kind")]


class UploadedArtifact(BaseModel):
    """Raw uploaded file before extraction."""

    filename: str
    mime_type: str
    data: bytes


class ComparisonRequest(BaseModel):
    """Metadata framing a baseline/compare pair."""

    student_name: str = Field(..., min_length=1, max_length=200)
    plan_type_code: str = Field(..., min_length=1, max_length=32)
    artifact_date: date
    description: str | None = None


class ComparisonReport(BaseModel):
    """Model-written comparison of two artifacts."""

    analysis_text: str
    baseline_kind: Literal["text", "image"]
    compare_kind: Literal["text", "image"]
    generation_source: Literal["openai", "stub"] = "openai"
