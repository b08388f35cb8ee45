import asyncio
import copy
import re
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport

from pokedex_api.main import create_app
from pokedex_api.api.dependencies import get_creation_queue, get_pokemon_store
from pokedex_api.catalog.creation import PokemonCreationQueue
from pokedex_api.catalog.predicates import (
    LIKE_ESCAPE,
    AllOf,
    AnyOf,
    IdEquals,
    IdIn,
    MatchAll,
    NameLike,
    StatRange,
    TypeIn,
)


def make_pokemon(
    pokemon_id: int,
    english: Optional[str] = None,
    types=("Normal",),
    french: Optional[str] = None,
    japanese: str = "ポケモン",
    chinese: str = "宝可梦",
    **stats,
) -> Dict[str, Any]:
    english = english or f"Pokemon{pokemon_id}"
    base = {
        "HP": 50,
        "Attack": 50,
        "Defense": 50,
        "SpecialAttack": 50,
        "SpecialDefense": 50,
        "Speed": 50,
    }
    base.update(stats)
    return {
        "id": pokemon_id,
        "name": {
            "english": english,
            "french": french or english,
            "japanese": japanese,
            "chinese": chinese,
        },
        "type": list(types),
        "base": base,
        "image": f"http://img.test/{pokemon_id}.png",
    }


def _like_to_regex(pattern: str) -> "re.Pattern[str]":
    out = []
    chars = iter(pattern)
    for ch in chars:
        if ch == LIKE_ESCAPE:
            out.append(re.escape(next(chars, "")))
        elif ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


def matches(predicate, doc: Dict[str, Any]) -> bool:
    """Evaluate a predicate tree against a plain document."""
    if isinstance(predicate, MatchAll):
        return True
    if isinstance(predicate, IdEquals):
        return doc["id"] == predicate.id
    if isinstance(predicate, IdIn):
        return doc["id"] in predicate.ids
    if isinstance(predicate, TypeIn):
        return any(t in predicate.values for t in doc["type"])
    if isinstance(predicate, StatRange):
        value = doc["base"][predicate.stat]
        if predicate.minimum is not None and value < predicate.minimum:
            return False
        if predicate.maximum is not None and value > predicate.maximum:
            return False
        return True
    if isinstance(predicate, NameLike):
        return bool(_like_to_regex(predicate.pattern).fullmatch(doc["name"][predicate.language]))
    if isinstance(predicate, AllOf):
        return all(matches(c, doc) for c in predicate.clauses)
    if isinstance(predicate, AnyOf):
        return any(matches(c, doc) for c in predicate.clauses)
    raise TypeError(predicate)


class FakePokemonStore:
    """In-memory stand-in for PokemonStore with the same interface."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None) -> None:
        self.records: List[Dict[str, Any]] = [copy.deepcopy(r) for r in records or []]
        self.commits = 0

    def _sorted(self, predicate) -> List[Dict[str, Any]]:
        hits = [r for r in self.records if matches(predicate, r)]
        return [copy.deepcopy(r) for r in sorted(hits, key=lambda r: r["id"])]

    async def commit(self) -> None:
        self.commits += 1

    async def count(self, predicate) -> int:
        return len(self._sorted(predicate))

    async def find(self, predicate, skip: int = 0, limit: Optional[int] = None):
        hits = self._sorted(predicate)[skip:]
        return hits if limit is None else hits[:limit]

    async def find_one(self, predicate):
        hits = await self.find(predicate, limit=1)
        return hits[0] if hits else None

    async def list_summaries(self):
        return [
            {"id": r["id"], "name": {"english": r["name"]["english"]}, "type": r["type"], "image": r["image"]}
            for r in self._sorted(MatchAll())
        ]

    async def max_id(self) -> Optional[int]:
        # Yield to the loop so unserialized callers would interleave here
        await asyncio.sleep(0)
        return max((r["id"] for r in self.records), default=None)

    async def insert(self, document):
        await asyncio.sleep(0)
        self.records.append(copy.deepcopy(document))
        return copy.deepcopy(document)

    async def update(self, pokemon_id, document):
        for i, r in enumerate(self.records):
            if r["id"] == pokemon_id:
                self.records[i] = copy.deepcopy(document)
                return copy.deepcopy(document)
        return None

    async def delete(self, pokemon_id):
        for i, r in enumerate(self.records):
            if r["id"] == pokemon_id:
                return self.records.pop(i)
        return None

    @asynccontextmanager
    async def scope(self):
        yield self
        await self.commit()


@pytest.fixture
def fake_store():
    return FakePokemonStore()


@pytest.fixture
async def creation_queue(fake_store):
    queue = PokemonCreationQueue(store_factory=fake_store.scope)
    queue.start()
    yield queue
    await queue.stop()


@pytest.fixture
def app(fake_store, creation_queue):
    app = create_app()
    app.dependency_overrides[get_pokemon_store] = lambda: fake_store
    app.dependency_overrides[get_creation_queue] = lambda: creation_queue
    yield app
    app.dependency_overrides = {}


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
