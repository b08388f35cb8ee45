"""
Database Package

Provides SQLAlchemy async session management, the ``pokemon`` model and
the document-style store used by the catalog routes.
"""

from .session import (
    get_async_session,
    pokemon_store_scope,
    check_connection,
    create_tables,
    async_engine,
    AsyncSessionLocal,
)
from .models import Base, Pokemon
from .pokemon_store import PokemonStore, compile_predicate

__all__ = [
    "get_async_session",
    "pokemon_store_scope",
    "check_connection",
    "create_tables",
    "async_engine",
    "AsyncSessionLocal",
    "Base",
    "Pokemon",
    "PokemonStore",
    "compile_predicate",
]
