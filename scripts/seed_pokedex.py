"""
Load a pokedex JSON file into the catalog database.

Usage:
    python scripts/seed_pokedex.py path/to/pokedex.json

The file holds a list of records with ``id``, ``name``, ``type``, ``base``
and optionally ``image``. Statistic keys may use either ``SpecialAttack``
or the ``Sp. Attack`` spelling. Records whose id already exists are skipped.
"""

import asyncio
import json
import logging
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from pydantic import ValidationError

from pokedex_api.api.models import PokemonRecord
from pokedex_api.catalog.allocator import default_image_url
from pokedex_api.catalog.predicates import IdEquals
from pokedex_api.core.logging_config import setup_logging
from pokedex_api.db import async_engine, create_tables, pokemon_store_scope

logger = logging.getLogger("pokedex.seed")

STAT_ALIASES = {
    "Sp. Attack": "SpecialAttack",
    "Sp. Defense": "SpecialDefense",
}


def normalize(entry: dict) -> dict:
    base = {STAT_ALIASES.get(k, k): v for k, v in (entry.get("base") or {}).items()}
    return {
        "id": entry.get("id"),
        "name": entry.get("name"),
        "type": entry.get("type"),
        "base": base,
        "image": entry.get("image") or default_image_url(entry.get("id")),
    }


async def main(path: str) -> None:
    setup_logging("INFO")

    with open(path, encoding="utf-8") as f:
        entries = json.load(f)
    logger.info("Loaded %d entries from %s", len(entries), path)

    await create_tables()

    inserted = skipped = invalid = 0
    async with pokemon_store_scope() as store:
        for entry in entries:
            try:
                record = PokemonRecord.model_validate(normalize(entry)).model_dump()
            except ValidationError as exc:
                logger.warning("Skipping invalid entry %r: %s", entry.get("id"), exc)
                invalid += 1
                continue

            if await store.find_one(IdEquals(record["id"])) is not None:
                skipped += 1
                continue

            await store.insert(record)
            inserted += 1

    logger.info("Inserted %d, skipped %d existing, %d invalid", inserted, skipped, invalid)
    await async_engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
