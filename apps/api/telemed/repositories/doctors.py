"""Doctor profile repository helpers."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.doctor import DoctorProfile


async def get_by_id(session: AsyncSession, doctor_id: str) -> DoctorProfile | None:
    """Return a doctor profile by identifier."""

    return await session.get(DoctorProfile, doctor_id)
