"""Medicine catalog model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class Medicine(Base):
    """Coded medicine available to the prescription builder."""

    __tablename__ = "medicines"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    medicine_code: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    medicine_name: Mapped[str] = mapped_column(String, nullable=False)
    generic_name: Mapped[str | None] = mapped_column(String)
    strength: Mapped[str | None] = mapped_column(String)
    form: Mapped[str | None] = mapped_column(String)
    category: Mapped[str | None] = mapped_column(String)
    manufacturer: Mapped[str | None] = mapped_column(String)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
