"""Draft generation domain models."""

from typing import Literal

from pydantic import BaseModel, Field

from planassist.models.common import PlanTypeCode


class StudentContext(BaseModel):
    """Optional facts about the student that shape the draft."""

    grade: str | None = None
    first_name: str | None = None
    need_description: str | None = None


class DraftRequest(BaseModel):
    """Request to draft one field of a plan."""

    plan_type_code: PlanTypeCode
    section_key: str = Field(..., min_length=1, description="Fallback section tag")
    field_key: str = Field(..., min_length=1)
    jurisdiction_id: str | None = None
    student_context: StudentContext | None = None
    user_prompt: str | None = Field(None, max_length=4000)


class GeneratedDraft(BaseModel):
    """Generated field content plus the chunks that grounded it."""

    text: str
    source_chunk_ids: list[str]
    section_tag: str
    retrieval_stage: Literal["exact", "relaxed", "generic"]
    generation_source: Literal["openai", "stub"] = "openai"


class NoReferenceMaterial(BaseModel):
    """Terminal outcome when no reference chunk exists for a field.

    Not an error: the caller should disable drafting for the field rather
    than retry.
    """

    plan_type_code: PlanTypeCode
    section_tag: str
    reason: str = "No reference content available for this section"
