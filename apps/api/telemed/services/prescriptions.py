"""Prescription creation."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import PersistenceError
from ..models.prescription import Prescription, PrescriptionMedicine
from ..repositories import medicines as medicines_repo
from ..repositories import prescriptions as prescriptions_repo
from ..schemas import prescriptions as schemas

logger = logging.getLogger(__name__)


async def create_prescription(
    payload: schemas.PrescriptionCreateRequest,
    session: AsyncSession,
) -> schemas.PrescriptionCreateResponse:
    """Persist a prescription header and its numbered medicine lines in one transaction."""

    prescription_id = str(uuid4())
    try:
        async with session.begin():
            medicine_ids = await medicines_repo.ids_by_code(
                session, (item.medicine_code for item in payload.medicines)
            )
            prescription = Prescription(
                id=prescription_id,
                patient_id=payload.patient_id,
                doctor_id=payload.doctor_id,
                consultation_id=payload.consultation_id or None,
                diagnosis=_blank_to_none(payload.diagnosis),
                general_instructions=_blank_to_none(payload.general_instructions),
                follow_up_date=payload.follow_up_date,
                prescription_date=datetime.now(timezone.utc),
                medications=[_summary(item) for item in payload.medicines],
            )
            prescription.medicines = [
                PrescriptionMedicine(
                    id=str(uuid4()),
                    prescription_id=prescription_id,
                    medicine_id=medicine_ids.get(item.medicine_code),
                    medicine_code=item.medicine_code,
                    medicine_name=item.medicine_name,
                    dosage=item.dosage,
                    frequency=item.frequency,
                    frequency_code=item.frequency_code,
                    frequency_symbol=item.frequency_symbol,
                    duration_days=item.duration_days,
                    meal_timing=item.meal_timing,
                    special_instructions=_blank_to_none(item.instructions),
                    medicine_sequence=sequence,
                )
                for sequence, item in enumerate(payload.medicines, start=1)
            ]
            await prescriptions_repo.add(session, prescription)
    except SQLAlchemyError as exc:
        logger.exception("Saving prescription for patient=%s failed", payload.patient_id)
        raise PersistenceError("Failed to save prescription") from exc

    logger.info(
        "Prescription %s created by doctor=%s with %s medicines",
        prescription_id,
        payload.doctor_id,
        len(prescription.medicines),
    )
    return schemas.PrescriptionCreateResponse(
        prescription_id=prescription_id,
        medicines_added=len(prescription.medicines),
        prescription=_to_detail(prescription),
    )


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _summary(item: schemas.PrescribedMedicine) -> dict[str, Any]:
    return {
        "code": item.medicine_code,
        "name": item.medicine_name,
        "dosage": item.dosage,
        "frequency": item.frequency_symbol,
        "durationDays": item.duration_days,
        "mealTiming": item.meal_timing.value,
    }


def _to_detail(prescription: Prescription) -> schemas.PrescriptionDetail:
    return schemas.PrescriptionDetail(
        id=prescription.id,
        patient_id=prescription.patient_id,
        doctor_id=prescription.doctor_id,
        consultation_id=prescription.consultation_id,
        diagnosis=prescription.diagnosis,
        general_instructions=prescription.general_instructions,
        follow_up_date=prescription.follow_up_date,
        prescription_date=prescription.prescription_date,
        medications=list(prescription.medications or []),
        medicines=[
            schemas.PrescriptionLine(
                id=line.id,
                medicine_id=line.medicine_id,
                medicine_code=line.medicine_code,
                medicine_name=line.medicine_name,
                dosage=line.dosage,
                frequency=line.frequency,
                frequency_code=line.frequency_code,
                frequency_symbol=line.frequency_symbol,
                duration_days=line.duration_days,
                meal_timing=line.meal_timing,
                special_instructions=line.special_instructions,
                medicine_sequence=line.medicine_sequence,
            )
            for line in prescription.medicines
        ],
    )
