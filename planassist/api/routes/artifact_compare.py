"""Artifact comparison endpoint - POST /artifact-compare."""

import logging
from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel

from planassist.config import Settings, get_settings
from planassist.extraction.extractor import UnsupportedMimeTypeError, is_supported_mime_type
from planassist.llm.client import GenerationError, LLMClient, get_llm_client
from planassist.models.artifact import ComparisonRequest, UploadedArtifact
from planassist.services.artifact_compare import (
    ArtifactReadError,
    compare_artifacts,
    resolve_mime_type,
)

router = APIRouter(prefix="/artifact-compare", tags=["artifact-compare"])
logger = logging.getLogger(__name__)

ALLOWED_TYPES_MESSAGE = "Allowed: PDF, DOC, DOCX, TXT, MD, RTF, JPEG, PNG, GIF, WEBP"


class ComparisonResponse(BaseModel):
    """Response for POST /artifact-compare."""

    analysis_text: str
    baseline_kind: Literal["text", "image"]
    compare_kind: Literal["text", "image"]


async def _read_upload(role: str, file: UploadFile, settings: Settings) -> UploadedArtifact:
    """Read an upload and apply the type and size checks of the upload boundary.

    At most ``max_upload_bytes + 1`` bytes are read; the extra byte only
    signals that the limit was exceeded.
    """
    data = await file.read(settings.max_upload_bytes + 1)

    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The {role} file is empty",
        )

    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"The {role} file exceeds {settings.max_upload_bytes} bytes",
        )

    upload = UploadedArtifact(
        filename=file.filename or role,
        mime_type=file.content_type or "",
        data=data,
    )

    if not is_supported_mime_type(resolve_mime_type(upload)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {role} file type. {ALLOWED_TYPES_MESSAGE}",
        )

    return upload


@router.post("", response_model=ComparisonResponse)
async def create_comparison(
    student_name: Annotated[str, Form(min_length=1, max_length=200)],
    plan_type_code: Annotated[str, Form(min_length=1, max_length=32)],
    artifact_date: Annotated[date, Form()],
    baseline_file: Annotated[UploadFile, File(description="Expected work")],
    compare_file: Annotated[UploadFile, File(description="Student-produced work")],
    llm: Annotated[LLMClient, Depends(get_llm_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    description: Annotated[str | None, Form(max_length=2000)] = None,
) -> ComparisonResponse:
    """Compare a student artifact against a baseline artifact.

    Raises:
        HTTPException: 400/413 at the upload boundary, 422 when a file
            cannot be read, 502 when the generation call fails
    """
    baseline = await _read_upload("baseline", baseline_file, settings)
    compare = await _read_upload("compare", compare_file, settings)

    request = ComparisonRequest(
        student_name=student_name,
        plan_type_code=plan_type_code,
        artifact_date=artifact_date,
        description=description,
    )

    try:
        report = await compare_artifacts(request, baseline, compare, llm=llm, settings=settings)
    except UnsupportedMimeTypeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ArtifactReadError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except GenerationError as e:
        logger.error(f"Artifact comparison failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to compare artifacts",
        ) from e

    return ComparisonResponse(
        analysis_text=report.analysis_text,
        baseline_kind=report.baseline_kind,
        compare_kind=report.compare_kind,
    )
