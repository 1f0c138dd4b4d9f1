"""Doctor profile endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas.doctors import DoctorProfileResponse
from ..services import doctors as doctors_service

router = APIRouter()


@router.get("/{doctor_id}", response_model=DoctorProfileResponse)
async def get_doctor(doctor_id: str, session: AsyncSession = Depends(get_session)) -> DoctorProfileResponse:
    return await doctors_service.get_profile(doctor_id, session)
