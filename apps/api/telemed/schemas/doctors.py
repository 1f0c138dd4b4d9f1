"""Schemas for doctor profiles."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..models.doctor import DoctorStatus


class DoctorProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    email: str
    full_name: str = Field(..., alias="fullName")
    phone_number: str = Field(..., alias="phoneNumber")
    medical_license_number: str = Field(..., alias="medicalLicenseNumber")
    specialization: list[str] = Field(default_factory=list)
    qualification: list[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, alias="experienceYears")
    consultation_fee: Decimal = Field(default=Decimal("0"), alias="consultationFee")
    bio: str | None = None
    status: DoctorStatus
