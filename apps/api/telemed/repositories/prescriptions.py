"""Prescription repository helpers."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.prescription import Prescription


async def add(session: AsyncSession, prescription: Prescription) -> Prescription:
    """Stage a prescription and its lines, flushing so ids are usable."""

    session.add(prescription)
    await session.flush()
    return prescription
