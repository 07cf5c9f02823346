"""Integration tests for the SQLAlchemy reference store (SQLite in-memory)."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from planassist.db.models import ReferenceChunk, ReferenceDocument
from planassist.models.common import GradeBand, PlanTypeCode
from planassist.models.reference import ChunkQuery
from planassist.reference.retriever import RetrievalStage, retrieve_reference_context
from planassist.reference.store import SqlReferenceStore


def _document(document_id: str, **overrides) -> ReferenceDocument:
    values = {
        "document_id": document_id,
        "title": f"Best practices {document_id}",
        "plan_type_code": "IEP",
        "is_active": True,
        "ingestion_status": "COMPLETE",
        "created_at": datetime(2025, 1, 1),
    }
    values.update(overrides)
    return ReferenceDocument(**values)


def _chunk(chunk_id: str, document_id: str, section_tag: str, **overrides) -> ReferenceChunk:
    values = {
        "chunk_id": chunk_id,
        "document_id": document_id,
        "sequence": 0,
        "plan_type_code": "IEP",
        "section_tag": section_tag,
        "text": f"Text of {chunk_id}",
        "created_at": datetime(2025, 1, 1),
    }
    values.update(overrides)
    return ReferenceChunk(**values)


@pytest_asyncio.fixture
async def session(sqlite_engine: AsyncEngine):
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        session.add_all(
            [
                _document("doc-active"),
                _document("doc-inactive", is_active=False),
                _document("doc-pending", ingestion_status="PROCESSING"),
                _document("doc-504", plan_type_code="FIVE_OH_FOUR"),
                _chunk("c-old", "doc-active", "goals", created_at=datetime(2024, 5, 1)),
                _chunk("c-new", "doc-active", "goals", sequence=1, created_at=datetime(2025, 5, 1)),
                _chunk(
                    "c-ny-35",
                    "doc-active",
                    "goals",
                    sequence=2,
                    jurisdiction_id="NY",
                    grade_band="3-5",
                    created_at=datetime(2025, 2, 1),
                ),
                _chunk("c-inactive", "doc-inactive", "goals"),
                _chunk("c-pending", "doc-pending", "goals"),
                _chunk("c-504", "doc-504", "goals", plan_type_code="FIVE_OH_FOUR"),
                _chunk("c-transition", "doc-active", "transition", sequence=3),
            ]
        )
        await session.commit()
        yield session


@pytest.mark.asyncio
async def test_query_filters_and_orders_newest_first(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    chunks = await store.query_chunks(
        ChunkQuery(plan_type_code=PlanTypeCode.IEP, section_tag="goals", limit=10)
    )

    assert [c.chunk_id for c in chunks] == ["c-new", "c-ny-35", "c-old"]
    assert all(c.plan_type_code == PlanTypeCode.IEP for c in chunks)


@pytest.mark.asyncio
async def test_optional_narrowing(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    chunks = await store.query_chunks(
        ChunkQuery(
            plan_type_code=PlanTypeCode.IEP,
            section_tag="goals",
            jurisdiction_id="NY",
            grade_band=GradeBand.G3_5,
        )
    )

    assert [c.chunk_id for c in chunks] == ["c-ny-35"]
    assert chunks[0].grade_band == GradeBand.G3_5
    assert chunks[0].jurisdiction_id == "NY"


@pytest.mark.asyncio
async def test_limit(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    chunks = await store.query_chunks(
        ChunkQuery(plan_type_code=PlanTypeCode.IEP, section_tag="goals", limit=1)
    )

    assert [c.chunk_id for c in chunks] == ["c-new"]


@pytest.mark.asyncio
async def test_count_excludes_unretrievable_documents(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    assert await store.count_chunks(PlanTypeCode.IEP, "goals") == 3
    assert await store.count_chunks(PlanTypeCode.FIVE_OH_FOUR, "goals") == 1
    assert await store.count_chunks(PlanTypeCode.IEP, "esy") == 0


@pytest.mark.asyncio
async def test_staged_retrieval_against_sql(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    result = await retrieve_reference_context(
        store,
        plan_type_code=PlanTypeCode.IEP,
        section_tag="goals_reading",
        jurisdiction_id="CA",
        grade_band=GradeBand.K_2,
    )

    assert result.stage == RetrievalStage.generic
    assert [c.chunk_id for c in result.chunks] == ["c-new", "c-ny-35", "c-old"]


@pytest.mark.asyncio
async def test_section_counts_in_one_grouped_query(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    assert await store.count_chunks_by_section(PlanTypeCode.IEP) == {"goals": 3, "transition": 1}
    assert await store.count_chunks_by_section(PlanTypeCode.FIVE_OH_FOUR) == {"goals": 1}
    assert await store.count_chunks_by_section(PlanTypeCode.BEHAVIOR_PLAN) == {}


@pytest.mark.asyncio
async def test_relaxed_retrieval_against_sql(session: AsyncSession) -> None:
    store = SqlReferenceStore(session)

    result = await retrieve_reference_context(
        store,
        plan_type_code=PlanTypeCode.IEP,
        section_tag="goals",
        jurisdiction_id="CA",
        grade_band=GradeBand.G3_5,
    )

    assert result.stage == RetrievalStage.relaxed
    assert [c.chunk_id for c in result.chunks] == ["c-ny-35"]


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_postgres_store_excludes_inactive_documents(postgres_engine: AsyncEngine) -> None:
    created = datetime(2025, 1, 1, tzinfo=timezone.utc)
    async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
        session.add_all(
            [
                _document("pg-active", created_at=created),
                _document("pg-inactive", is_active=False, created_at=created),
                _chunk("pg-c1", "pg-active", "esy", created_at=created),
                _chunk("pg-c2", "pg-inactive", "esy", created_at=created),
            ]
        )
        await session.commit()

        store = SqlReferenceStore(session)
        chunks = await store.query_chunks(
            ChunkQuery(plan_type_code=PlanTypeCode.IEP, section_tag="esy")
        )

        assert [c.chunk_id for c in chunks] == ["pg-c1"]
