"""
Identifier Allocator

A new record's id is one greater than the highest id currently stored,
or 1 for an empty store. The read-then-insert sequence is not atomic by
itself; ``catalog.creation`` serializes it through a single worker.
"""

from __future__ import annotations

from typing import Any, Dict

from ..api.models import PokemonCreate
from ..config import settings
from ..db.pokemon_store import PokemonStore


async def allocate_id(store: PokemonStore) -> int:
    current = await store.max_id()
    return 1 if current is None else current + 1


def default_image_url(pokemon_id: int) -> str:
    return settings.image_url_template.format(id=pokemon_id)


async def create_pokemon(store: PokemonStore, draft: PokemonCreate) -> Dict[str, Any]:
    """
    Allocate an id, default the image and insert the record.

    Must only be called from the creation worker; concurrent callers
    could allocate the same id.
    """
    pokemon_id = await allocate_id(store)

    document = draft.model_dump(exclude={"image"})
    document["id"] = pokemon_id
    document["image"] = draft.image or default_image_url(pokemon_id)

    return await store.insert(document)
