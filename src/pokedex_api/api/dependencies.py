from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..catalog.creation import PokemonCreationQueue
from ..db import PokemonStore, get_async_session, pokemon_store_scope


async def get_pokemon_store(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[PokemonStore, None]:
    yield PokemonStore(session)


# Started and stopped by the application lifespan
creation_queue = PokemonCreationQueue(store_factory=pokemon_store_scope)


def get_creation_queue() -> PokemonCreationQueue:
    return creation_queue
