"""Seed sample listings into the database.

Usage: python -m recommender.seed.run [listings.json]
"""

import asyncio
import json
import sys
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from recommender.database import async_session, create_all_tables
from recommender.models.property import Property
from recommender.seed.sample_properties import SAMPLE_PROPERTIES

_PROPERTY_COLUMNS = {c.name for c in Property.__table__.columns}


async def seed_properties(session: AsyncSession, records: list[dict]) -> int:
    """Insert listings whose id is not present yet. Unknown keys are ignored."""
    count = 0
    for data in records:
        values = {k: v for k, v in data.items() if k in _PROPERTY_COLUMNS}
        if values.get("id") and await session.get(Property, values["id"]) is not None:
            continue
        session.add(Property(**values))
        count += 1
    await session.commit()
    return count


def load_records(path: Path) -> list[dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("properties", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of property objects")
    return data


async def run_all_seeds(path: Path | None = None):
    """Create tables and load listings from *path* or the built-in samples."""
    await create_all_tables()
    records = load_records(path) if path else SAMPLE_PROPERTIES

    async with async_session() as session:
        added = await seed_properties(session, records)
        print(f"Properties: {added} added")

    print("Seeding complete.")


if __name__ == "__main__":
    asyncio.run(run_all_seeds(Path(sys.argv[1]) if len(sys.argv) > 1 else None))
