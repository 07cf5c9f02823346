"""Prometheus metrics for retrieval, extraction and generation."""

from prometheus_client import Counter, Histogram

retrieval_stage_total = Counter(
    "retrieval_stage_total",
    "Reference retrievals by the fallback stage that terminated them",
    ["plan_type", "stage"],
)

generation_latency_ms = Histogram(
    "generation_latency_ms",
    "Generation client latency in milliseconds",
    ["operation", "outcome"],
    buckets=[250, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

generation_errors_total = Counter(
    "generation_errors_total",
    "Total generation client failures",
    ["operation"],
)

extraction_errors_total = Counter(
    "extraction_errors_total",
    "Total document extraction failures",
    ["format"],
)


class PrometheusContentMetrics:
    """Prometheus-based metrics for the content pipeline."""

    def inc_retrieval_stage(self, plan_type: str, stage: str) -> None:
        """Count a retrieval that ended at ``stage``."""
        retrieval_stage_total.labels(plan_type=plan_type, stage=stage).inc()

    def record_generation(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record generation latency and count failures."""
        generation_latency_ms.labels(operation=operation, outcome=outcome).observe(latency_ms)
        if outcome != "success":
            generation_errors_total.labels(operation=operation).inc()

    def inc_extraction_error(self, format_name: str) -> None:
        """Increment extraction error counter."""
        extraction_errors_total.labels(format=format_name).inc()


content_metrics = PrometheusContentMetrics()
