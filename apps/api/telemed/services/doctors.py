"""Doctor profile lookups."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, PersistenceError
from ..repositories import doctors as doctors_repo
from ..schemas.doctors import DoctorProfileResponse

logger = logging.getLogger(__name__)


async def get_profile(doctor_id: str, session: AsyncSession) -> DoctorProfileResponse:
    try:
        doctor = await doctors_repo.get_by_id(session, doctor_id)
    except SQLAlchemyError as exc:
        logger.exception("Loading doctor profile %s failed", doctor_id)
        raise PersistenceError("Failed to load doctor profile") from exc
    if doctor is None:
        raise NotFoundError("Doctor profile not found")
    return DoctorProfileResponse.model_validate(doctor)
