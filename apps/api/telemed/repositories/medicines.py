"""Data access helpers for the medicine catalog."""
from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.medicine import Medicine


async def search_active(session: AsyncSession, *, query: str, limit: int = 10) -> Sequence[Medicine]:
    """Return active medicines whose name, generic name or code contains ``query``."""

    pattern = f"%{query.lower()}%"
    stmt = (
        select(Medicine)
        .where(Medicine.is_active.is_(True))
        .where(
            or_(
                func.lower(Medicine.medicine_name).like(pattern),
                func.lower(Medicine.generic_name).like(pattern),
                func.lower(Medicine.medicine_code).like(pattern),
            )
        )
        .order_by(Medicine.medicine_name.asc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def list_active(session: AsyncSession) -> Sequence[Medicine]:
    """Return every active medicine ordered by name."""

    stmt = select(Medicine).where(Medicine.is_active.is_(True)).order_by(Medicine.medicine_name.asc())
    result = await session.execute(stmt)
    return result.scalars().all()


async def ids_by_code(session: AsyncSession, codes: Iterable[str]) -> dict[str, str]:
    """Map medicine codes to catalog ids; unknown codes are omitted."""

    unique_codes = sorted(set(codes))
    if not unique_codes:
        return {}
    stmt = select(Medicine.medicine_code, Medicine.id).where(Medicine.medicine_code.in_(unique_codes))
    result = await session.execute(stmt)
    return {code: medicine_id for code, medicine_id in result.all()}
