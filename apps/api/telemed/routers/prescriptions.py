"""Prescription endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import prescriptions as schemas
from ..services import prescriptions as prescriptions_service

router = APIRouter()


@router.post("", response_model=schemas.PrescriptionCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    payload: schemas.PrescriptionCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> schemas.PrescriptionCreateResponse:
    """Save a prescription with its medicine lines."""

    return await prescriptions_service.create_prescription(payload, session)
