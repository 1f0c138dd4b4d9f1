"""Expose ORM models."""
from .doctor import DoctorProfile
from .medicine import Medicine
from .prescription import Prescription, PrescriptionMedicine

__all__ = [
    "DoctorProfile",
    "Medicine",
    "Prescription",
    "PrescriptionMedicine",
]
