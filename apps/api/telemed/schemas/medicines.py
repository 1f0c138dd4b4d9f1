"""Schemas for medicine lookup."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MedicineCard(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    name: str
    generic_name: str | None = Field(default=None, alias="genericName")
    strength: str | None = None
    form: str | None = None
    category: str | None = None
    manufacturer: str | None = None


class MedicineListResponse(BaseModel):
    success: bool = True
    medicines: list[MedicineCard]
    query: str | None = None
