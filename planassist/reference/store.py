"""Reference corpus store - read-only access to best-practice chunks.

Only chunks whose owning document is active and fully ingested are ever
returned. Plan type and section tag match exactly; jurisdiction and grade
band narrow the result only when provided. Results are newest first.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from planassist.db.models import ReferenceChunk as ReferenceChunkDB
from planassist.db.models import ReferenceDocument as ReferenceDocumentDB
from planassist.models.common import GradeBand, IngestionStatus, PlanTypeCode
from planassist.models.reference import ChunkQuery, ReferenceChunk
from planassist.reference.sections import section_tags_for_plan_type


class ReferenceStore(Protocol):
    """Protocol for reference corpus implementations."""

    async def query_chunks(self, query: ChunkQuery) -> list[ReferenceChunk]:
        """Return retrievable chunks matching the query, newest first."""
        ...

    async def count_chunks(self, plan_type_code: PlanTypeCode, section_tag: str) -> int:
        """Count retrievable chunks for a plan type and section tag."""
        ...

    async def count_chunks_by_section(self, plan_type_code: PlanTypeCode) -> dict[str, int]:
        """Retrievable chunk counts per section tag of a plan type."""
        ...

    def section_tags(self, plan_type_code: PlanTypeCode | str) -> list[str]:
        """Valid section tags for a plan type."""
        ...


def _parse_grade_band(value: str | None) -> GradeBand | None:
    if value is None:
        return None
    try:
        return GradeBand(value)
    except ValueError:
        return None


class SqlReferenceStore:
    """SQLAlchemy-backed reference store."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _retrievable(
        self, plan_type_code: PlanTypeCode, section_tag: str
    ) -> tuple[ColumnElement[bool], ...]:
        return (
            ReferenceChunkDB.plan_type_code == plan_type_code.value,
            ReferenceChunkDB.section_tag == section_tag,
            ReferenceDocumentDB.is_active.is_(True),
            ReferenceDocumentDB.ingestion_status == IngestionStatus.COMPLETE.value,
        )

    async def query_chunks(self, query: ChunkQuery) -> list[ReferenceChunk]:
        """Query chunks with the corpus filters applied in SQL."""
        stmt = (
            select(ReferenceChunkDB)
            .join(ReferenceChunkDB.document)
            .where(*self._retrievable(query.plan_type_code, query.section_tag))
        )

        if query.jurisdiction_id:
            stmt = stmt.where(ReferenceChunkDB.jurisdiction_id == query.jurisdiction_id)
        if query.grade_band:
            stmt = stmt.where(ReferenceChunkDB.grade_band == query.grade_band.value)

        stmt = stmt.order_by(
            ReferenceChunkDB.created_at.desc(), ReferenceChunkDB.sequence
        ).limit(query.limit)

        result = await self._session.execute(stmt)
        db_chunks = list(result.scalars().all())

        # Convert to domain models
        return [
            ReferenceChunk(
                chunk_id=db_chunk.chunk_id,
                document_id=db_chunk.document_id,
                plan_type_code=PlanTypeCode(db_chunk.plan_type_code),
                section_tag=db_chunk.section_tag or query.section_tag,
                text=db_chunk.text,
                grade_band=_parse_grade_band(db_chunk.grade_band),
                jurisdiction_id=db_chunk.jurisdiction_id,
                created_at=db_chunk.created_at,
            )
            for db_chunk in db_chunks
        ]

    async def count_chunks(self, plan_type_code: PlanTypeCode, section_tag: str) -> int:
        stmt = (
            select(func.count(ReferenceChunkDB.chunk_id))
            .join(ReferenceChunkDB.document)
            .where(*self._retrievable(plan_type_code, section_tag))
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def count_chunks_by_section(self, plan_type_code: PlanTypeCode) -> dict[str, int]:
        """One grouped count over every section tag of the plan type."""
        stmt = (
            select(ReferenceChunkDB.section_tag, func.count(ReferenceChunkDB.chunk_id))
            .join(ReferenceChunkDB.document)
            .where(
                ReferenceChunkDB.plan_type_code == plan_type_code.value,
                ReferenceChunkDB.section_tag.is_not(None),
                ReferenceDocumentDB.is_active.is_(True),
                ReferenceDocumentDB.ingestion_status == IngestionStatus.COMPLETE.value,
            )
            .group_by(ReferenceChunkDB.section_tag)
        )
        result = await self._session.execute(stmt)
        return {section_tag: int(count) for section_tag, count in result.all()}

    def section_tags(self, plan_type_code: PlanTypeCode | str) -> list[str]:
        return section_tags_for_plan_type(plan_type_code)


@dataclass(frozen=True)
class _StoredChunk:
    chunk: ReferenceChunk
    is_active: bool
    ingestion_status: IngestionStatus


class InMemoryReferenceStore:
    """In-memory implementation of ReferenceStore."""

    def __init__(self) -> None:
        self._chunks: list[_StoredChunk] = []

    def add_chunk(
        self,
        chunk: ReferenceChunk,
        *,
        is_active: bool = True,
        ingestion_status: IngestionStatus = IngestionStatus.COMPLETE,
    ) -> None:
        """Add a chunk along with its owning document's state."""
        self._chunks.append(_StoredChunk(chunk, is_active, ingestion_status))

    def _retrievable(self, plan_type_code: PlanTypeCode, section_tag: str) -> list[ReferenceChunk]:
        return [
            stored.chunk
            for stored in self._chunks
            if stored.is_active
            and stored.ingestion_status == IngestionStatus.COMPLETE
            and stored.chunk.plan_type_code == plan_type_code
            and stored.chunk.section_tag == section_tag
        ]

    async def query_chunks(self, query: ChunkQuery) -> list[ReferenceChunk]:
        chunks = self._retrievable(query.plan_type_code, query.section_tag)

        if query.jurisdiction_id:
            chunks = [c for c in chunks if c.jurisdiction_id == query.jurisdiction_id]
        if query.grade_band:
            chunks = [c for c in chunks if c.grade_band == query.grade_band]

        # Newest first; stable for equal or missing timestamps
        chunks.sort(
            key=lambda c: c.created_at.timestamp() if c.created_at else float("-inf"),
            reverse=True,
        )
        return chunks[: query.limit]

    async def count_chunks(self, plan_type_code: PlanTypeCode, section_tag: str) -> int:
        return len(self._retrievable(plan_type_code, section_tag))

    async def count_chunks_by_section(self, plan_type_code: PlanTypeCode) -> dict[str, int]:
        return dict(
            Counter(
                stored.chunk.section_tag
                for stored in self._chunks
                if stored.is_active
                and stored.ingestion_status == IngestionStatus.COMPLETE
                and stored.chunk.plan_type_code == plan_type_code
            )
        )

    def section_tags(self, plan_type_code: PlanTypeCode | str) -> list[str]:
        return section_tags_for_plan_type(plan_type_code)
