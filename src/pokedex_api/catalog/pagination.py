"""
Pagination Engine

Resolves ``page``/``limit`` query parameters, queries the store for the
matching total and the requested slice, and assembles the envelope.
Slices are always ordered by ``id`` ascending so repeated requests against
unchanged data return identical pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..api.models import PokemonPage
from ..db.pokemon_store import PokemonStore
from .predicates import Predicate

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20

# OFFSET and LIMIT are bound as PostgreSQL bigint
MAX_SQL_INT = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def parse_page_request(page: Optional[str], limit: Optional[str]) -> PageRequest:
    """
    Build a PageRequest; absent, unparseable or non-positive values fall
    back to page 1 and limit 20.
    """
    return PageRequest(
        page=_positive_int(page, DEFAULT_PAGE),
        limit=_positive_int(limit, DEFAULT_LIMIT),
    )


def total_pages(total: int, limit: int) -> int:
    """``ceil(total / limit)``, or 0 when limit is not positive."""
    if limit <= 0:
        return 0
    return -(-total // limit)


async def paginate(
    store: PokemonStore,
    predicate: Predicate,
    page_request: PageRequest,
) -> PokemonPage:
    """
    Return one page of records matching ``predicate``.

    ``total`` counts every match, independent of skip/limit. A page that
    starts beyond the largest representable offset is empty.
    """
    total = await store.count(predicate)
    if page_request.skip > MAX_SQL_INT:
        records = []
    else:
        records = await store.find(
            predicate,
            skip=page_request.skip,
            limit=min(page_request.limit, MAX_SQL_INT),
        )

    return PokemonPage(
        pokemons=records,
        page=page_request.page,
        limit=page_request.limit,
        total=total,
        total_pages=total_pages(total, page_request.limit),
    )
