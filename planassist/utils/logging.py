"""Structured logging for retrieval, extraction and generation."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredContentLogger:
    """Structured logger for the content pipeline."""

    def log_retrieval(
        self,
        *,
        plan_type: str,
        section_tag: str,
        stage: str,
        chunk_count: int,
        jurisdiction_id: str | None = None,
        grade_band: str | None = None,
    ) -> None:
        """Log one retrieval stage with its query and outcome."""
        log_data: dict[str, Any] = {
            "plan_type": plan_type,
            "section_tag": section_tag,
            "stage": stage,
            "chunk_count": chunk_count,
            "jurisdiction_id": jurisdiction_id,
            "grade_band": grade_band,
        }

        log_msg = f"Reference retrieval: {stage} {section_tag} - {chunk_count} chunk(s)"

        if chunk_count > 0:
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.debug(log_msg, extra={"structured": log_data})

    def log_generation(
        self,
        *,
        operation: str,
        model: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log a generation client call."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "model": model,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Generation: {operation} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_extraction_failure(self, *, format_name: str, mime_type: str, reason: str) -> None:
        """Log a document that could not be read."""
        logger.warning(
            f"Extraction failed: {format_name}",
            extra={
                "structured": {
                    "format": format_name,
                    "mime_type": mime_type,
                    "error_reason": reason,
                }
            },
        )


content_logger = StructuredContentLogger()
