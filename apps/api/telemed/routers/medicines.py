"""Medicine catalog endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import medicines as schemas
from ..services import medicines as medicines_service

router = APIRouter()


@router.get("/search", response_model=schemas.MedicineListResponse)
async def search_medicines(
    q: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> schemas.MedicineListResponse:
    """Search active medicines by name, generic name or code."""

    return await medicines_service.search(q, session)


@router.get("/all", response_model=schemas.MedicineListResponse)
async def list_medicines(session: AsyncSession = Depends(get_session)) -> schemas.MedicineListResponse:
    return await medicines_service.list_all(session)
