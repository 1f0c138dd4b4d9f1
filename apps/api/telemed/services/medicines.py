"""Medicine catalog lookups."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import PersistenceError, ValidationError
from ..models.medicine import Medicine
from ..repositories import medicines as medicines_repo
from ..schemas import medicines as schemas

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
SEARCH_LIMIT = 10


async def search(query: str | None, session: AsyncSession) -> schemas.MedicineListResponse:
    """Return up to ten active medicines matching ``query``."""

    term = (query or "").strip()
    if len(term) < MIN_QUERY_LENGTH:
        raise ValidationError(f"Search query must be at least {MIN_QUERY_LENGTH} characters")

    try:
        rows = await medicines_repo.search_active(session, query=term, limit=SEARCH_LIMIT)
    except SQLAlchemyError as exc:
        logger.exception("Medicine search failed for query=%r", term)
        raise PersistenceError("Failed to search medicines") from exc

    return schemas.MedicineListResponse(medicines=_to_cards(rows), query=term)


async def list_all(session: AsyncSession) -> schemas.MedicineListResponse:
    try:
        rows = await medicines_repo.list_active(session)
    except SQLAlchemyError as exc:
        logger.exception("Listing medicines failed")
        raise PersistenceError("Failed to load medicines") from exc
    return schemas.MedicineListResponse(medicines=_to_cards(rows))


def _to_cards(rows: Sequence[Medicine]) -> list[schemas.MedicineCard]:
    return [
        schemas.MedicineCard(
            code=row.medicine_code,
            name=row.medicine_name,
            generic_name=row.generic_name,
            strength=row.strength,
            form=row.form,
            category=row.category,
            manufacturer=row.manufacturer,
        )
        for row in rows
    ]
