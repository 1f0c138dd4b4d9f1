"""Create database schema and seed the medicine catalog for development."""
from __future__ import annotations

import asyncio
import logging
from uuid import uuid4

from sqlalchemy import select

from telemed.data.medicines import MEDICINES
from telemed.db.session import SessionLocal, engine
from telemed.models import DoctorProfile, Medicine, Prescription, PrescriptionMedicine  # noqa: F401 - register tables
from telemed.models.base import Base

logger = logging.getLogger("bootstrap_db")


async def create_schema() -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_medicines() -> int:
	"""Insert or refresh catalog medicines keyed by code."""

	async with SessionLocal() as session:
		async with session.begin():
			result = await session.execute(select(Medicine))
			existing = {medicine.medicine_code: medicine for medicine in result.scalars()}
			for entry in MEDICINES:
				medicine = existing.get(entry.code)
				if medicine is None:
					medicine = Medicine(id=str(uuid4()), medicine_code=entry.code)
					session.add(medicine)
				medicine.medicine_name = entry.name
				medicine.generic_name = entry.generic_name or None
				medicine.strength = entry.strength or None
				medicine.form = entry.form or None
				medicine.category = entry.category or None
				medicine.manufacturer = entry.manufacturer or None
				medicine.is_active = True
	return len(MEDICINES)


async def main() -> None:
	logging.basicConfig(level=logging.INFO)
	await create_schema()
	count = await seed_medicines()
	logger.info("Seeded %s medicines", count)
	await engine.dispose()


if __name__ == "__main__":
	asyncio.run(main())
