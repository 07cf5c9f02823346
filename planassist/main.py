"""FastAPI application."""

import logging

from fastapi import FastAPI

from planassist.api.routes.artifact_compare import router as artifact_compare_router
from planassist.api.routes.generation import router as generation_router
from planassist.api.routes.health import router as health_router
from planassist.api.routes.metrics import router as metrics_router
from planassist.config import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Plan Content Intelligence API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(generation_router, tags=["generation"])
app.include_router(artifact_compare_router, tags=["artifact-compare"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Plan Content Intelligence API", "version": "0.1.0"}
