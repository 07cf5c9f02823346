"""Prometheus metrics endpoint for the content pipeline."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from planassist.models.common import PlanTypeCode
from planassist.reference.retriever import RetrievalStage
from planassist.utils.metrics import retrieval_stage_total

router = APIRouter()


def register_retrieval_series() -> None:
    """Create a zero-valued retrieval series for every plan type and stage.

    Labelled counters only appear in the exposition once touched, so a
    stage nobody has hit yet would otherwise be missing rather than 0.
    """
    for plan_type in PlanTypeCode:
        for stage in RetrievalStage:
            retrieval_stage_total.labels(plan_type=plan_type.value, stage=stage.value)


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - retrieval_stage_total{plan_type, stage} (every combination present)
    - generation_latency_ms{operation, outcome}
    - generation_errors_total{operation}
    - extraction_errors_total{format}
    """
    register_retrieval_series()
    metrics_output = generate_latest()
    return Response(content=metrics_output, media_type=CONTENT_TYPE_LATEST)
