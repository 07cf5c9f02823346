"""FastAPI dependencies for injected collaborators."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from planassist.db.engine import get_session
from planassist.reference.store import ReferenceStore, SqlReferenceStore


async def get_reference_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ReferenceStore:
    """Reference corpus bound to the request's database session."""
    return SqlReferenceStore(session)
