"""Schemas for prescription creation."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..models.prescription import MealTiming


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PrescribedMedicine(_CamelModel):
    medicine_code: str = Field(..., alias="medicineCode", min_length=1)
    medicine_name: str = Field(..., alias="medicineName", min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: str = Field(..., min_length=1)
    frequency_code: str = Field(..., alias="frequencyCode")
    frequency_symbol: str = Field(..., alias="frequencySymbol")
    duration_days: int = Field(..., alias="durationDays", ge=1)
    meal_timing: MealTiming = Field(..., alias="mealTiming")
    instructions: str | None = None


class PrescriptionCreateRequest(_CamelModel):
    patient_id: str = Field(..., alias="patientId", min_length=1)
    doctor_id: str = Field(..., alias="doctorId", min_length=1)
    consultation_id: str | None = Field(default=None, alias="consultationId")
    diagnosis: str = ""
    general_instructions: str = Field(default="", alias="generalInstructions")
    follow_up_date: date | None = Field(default=None, alias="followUpDate")
    medicines: list[PrescribedMedicine] = Field(..., min_length=1)


class PrescriptionLine(_CamelModel):
    id: str
    medicine_id: str | None = Field(default=None, alias="medicineId")
    medicine_code: str = Field(..., alias="medicineCode")
    medicine_name: str = Field(..., alias="medicineName")
    dosage: str
    frequency: str
    frequency_code: str = Field(..., alias="frequencyCode")
    frequency_symbol: str = Field(..., alias="frequencySymbol")
    duration_days: int = Field(..., alias="durationDays")
    meal_timing: MealTiming | None = Field(default=None, alias="mealTiming")
    special_instructions: str | None = Field(default=None, alias="specialInstructions")
    medicine_sequence: int = Field(..., alias="medicineSequence")


class PrescriptionDetail(_CamelModel):
    id: str
    patient_id: str = Field(..., alias="patientId")
    doctor_id: str | None = Field(default=None, alias="doctorId")
    consultation_id: str | None = Field(default=None, alias="consultationId")
    diagnosis: str | None = None
    general_instructions: str | None = Field(default=None, alias="generalInstructions")
    follow_up_date: date | None = Field(default=None, alias="followUpDate")
    prescription_date: datetime = Field(..., alias="prescriptionDate")
    medications: list[dict[str, Any]] = Field(default_factory=list)
    medicines: list[PrescriptionLine] = Field(default_factory=list)


class PrescriptionCreateResponse(_CamelModel):
    success: bool = True
    prescription_id: str = Field(..., alias="prescriptionId")
    medicines_added: int = Field(..., alias="medicinesAdded")
    prescription: PrescriptionDetail
