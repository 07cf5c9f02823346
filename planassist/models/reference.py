"""Reference corpus domain models."""

from datetime import datetime

from pydantic import BaseModel, Field

from planassist.models.common import GradeBand, PlanTypeCode


class ReferenceChunk(BaseModel):
    """Best-practice example text used to ground generated content."""

    model_config = {"frozen": True}

    chunk_id: str
    document_id: str
    plan_type_code: PlanTypeCode
    section_tag: str
    text: str
    grade_band: GradeBand | None = None
    jurisdiction_id: str | None = None
    created_at: datetime | None = None


class ChunkQuery(BaseModel):
    """Filter for a reference corpus query.

    Plan type and section tag are always matched exactly. Jurisdiction and
    grade band only narrow the result when set.
    """

    plan_type_code: PlanTypeCode
    section_tag: str = Field(..., min_length=1)
    jurisdiction_id: str | None = None
    grade_band: GradeBand | None = None
    limit: int = Field(3, ge=1, le=20)
