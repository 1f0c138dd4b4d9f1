"""Prescription models."""
from __future__ import annotations

from datetime import date, datetime
import enum

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow


class MealTiming(str, enum.Enum):
    BEFORE = "before"
    AFTER = "after"
    WITH = "with"


class Prescription(Base):
    """Prescription header written by a doctor for a patient."""

    __tablename__ = "prescriptions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    patient_id: Mapped[str] = mapped_column(String, nullable=False)
    doctor_id: Mapped[str | None] = mapped_column(ForeignKey("doctor_profiles.id", ondelete="SET NULL"))
    consultation_id: Mapped[str | None] = mapped_column(String)
    diagnosis: Mapped[str | None] = mapped_column(String)
    general_instructions: Mapped[str | None] = mapped_column(String)
    follow_up_date: Mapped[date | None] = mapped_column(Date)
    prescription_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    medications: Mapped[list] = mapped_column(JSONB, default=list, nullable=False)

    medicines: Mapped[list["PrescriptionMedicine"]] = relationship(
        "PrescriptionMedicine",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionMedicine.medicine_sequence",
    )


class PrescriptionMedicine(Base):
    """One numbered medicine line on a prescription."""

    __tablename__ = "prescription_medicines"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    prescription_id: Mapped[str] = mapped_column(ForeignKey("prescriptions.id", ondelete="CASCADE"), nullable=False)
    medicine_id: Mapped[str | None] = mapped_column(ForeignKey("medicines.id", ondelete="SET NULL"))
    medicine_code: Mapped[str] = mapped_column(String, nullable=False)
    medicine_name: Mapped[str] = mapped_column(String, nullable=False)
    dosage: Mapped[str] = mapped_column(String, nullable=False)
    frequency: Mapped[str] = mapped_column(String, nullable=False)
    frequency_code: Mapped[str] = mapped_column(String, nullable=False)
    frequency_symbol: Mapped[str] = mapped_column(String, nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    meal_timing: Mapped[MealTiming | None] = mapped_column(Enum(MealTiming, name="meal_timing"))
    special_instructions: Mapped[str | None] = mapped_column(String)
    medicine_sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    prescription: Mapped[Prescription] = relationship("Prescription", back_populates="medicines")
