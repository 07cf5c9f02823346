"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from planassist.config import Settings
from planassist.db.models import Base
from planassist.models.common import GradeBand, PlanTypeCode
from planassist.models.reference import ReferenceChunk
from planassist.reference.store import InMemoryReferenceStore


class RecordingLLMClient:
    """Generation client fake that records every call."""

    def __init__(self, response: str = "Generated field content.", error: Exception | None = None):
        self.source = "stub"
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        *,
        operation: str,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> str:
        self.calls.append(
            {
                "operation": operation,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


ChunkFactory = Callable[..., ReferenceChunk]


@pytest.fixture
def make_chunk() -> ChunkFactory:
    """Factory for reference chunks with sensible defaults."""
    counter = {"n": 0}

    def _make(
        *,
        section_tag: str,
        plan_type_code: PlanTypeCode = PlanTypeCode.IEP,
        text: str | None = None,
        grade_band: GradeBand | None = None,
        jurisdiction_id: str | None = None,
        chunk_id: str | None = None,
        created_at: datetime | None = None,
    ) -> ReferenceChunk:
        counter["n"] += 1
        n = counter["n"]
        return ReferenceChunk(
            chunk_id=chunk_id or f"chunk-{n}",
            document_id="doc-1",
            plan_type_code=plan_type_code,
            section_tag=section_tag,
            text=text or f"Example text {n} for {section_tag}.",
            grade_band=grade_band,
            jurisdiction_id=jurisdiction_id,
            created_at=created_at or datetime(2025, 1, n % 28 + 1, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def store() -> InMemoryReferenceStore:
    """Empty in-memory reference store."""
    return InMemoryReferenceStore()


@pytest.fixture
def llm() -> RecordingLLMClient:
    """Recording generation client returning fixed text."""
    return RecordingLLMClient()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the developer's environment."""
    return Settings(openai_api_key=None, reference_chunk_limit=3)


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the reference corpus schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def make_llm() -> type[RecordingLLMClient]:
    """Recording generation client class, for custom responses or errors."""
    return RecordingLLMClient


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to point at a real PostgreSQL database. Tests using
    this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
