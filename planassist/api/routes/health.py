"""Health check endpoints.

- /health: liveness, always 200
- /healthz: reference corpus database connectivity plus generation client mode
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from planassist.config import Settings, get_settings
from planassist.db.engine import create_async_engine_from_settings

router = APIRouter()


async def check_db(settings: Settings) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        engine = create_async_engine_from_settings(settings)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        finally:
            await engine.dispose()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


def check_generation(settings: Settings) -> str:
    """Report whether a real generation client is configured."""
    api_key = settings.openai_api_key
    if api_key and api_key.get_secret_value():
        return "openai"
    return "stub"


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Health check endpoint.

    Returns:
        200 with component status if the database is reachable
        503 otherwise
    """
    settings = get_settings()

    db_ok, db_status = await check_db(settings)

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {
            "db": db_status,
            "generation": check_generation(settings),
        },
    }

    if not db_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
