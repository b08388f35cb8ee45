"""
Pokemon Catalog Routes

This module exposes the catalog endpoints:
- Paginated listing and filtered listing
- Multilingual name search
- Batch lookup by ids and a projected listing of every record
- Single-record create, read, update and delete

Routes only parse parameters and delegate to the catalog engines; errors
raised there (validation, not found, store failures) are turned into JSON
responses by the handlers registered in ``main.create_app``.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from .dependencies import get_creation_queue, get_pokemon_store
from .models import (
    DeletedPokemon,
    PokemonCreate,
    PokemonPage,
    PokemonRecord,
    PokemonSummary,
    PokemonUpdate,
)
from ..catalog.creation import PokemonCreationQueue
from ..catalog.filters import build_filter_predicate, parse_filter_params
from ..catalog.lookup import parse_id_list, parse_path_id
from ..catalog.pagination import paginate, parse_page_request
from ..catalog.predicates import IdEquals, IdIn, MatchAll
from ..catalog.search import build_search_predicate
from ..catalog.updates import apply_update
from ..core.errors import PokemonNotFoundError
from ..db import PokemonStore

router = APIRouter(prefix="/pokemon", tags=["pokemon"])

Store = Annotated[PokemonStore, Depends(get_pokemon_store)]


# ---------------------------------------------------------------------
# Collection Routes
# ---------------------------------------------------------------------

@router.get(
    "",
    response_model=PokemonPage,
    summary="List pokemon page by page",
)
async def list_pokemon(
    store: Store,
    page: Optional[str] = Query(None, description="Page number, 1-based"),
    limit: Optional[str] = Query(None, description="Page size"),
) -> PokemonPage:
    """
    Return one page of the whole catalog ordered by id.
    """
    return await paginate(store, MatchAll(), parse_page_request(page, limit))


@router.get(
    "/search",
    response_model=List[PokemonRecord],
    summary="Search pokemon by localized name",
)
async def search_pokemon(
    store: Store,
    name: Optional[str] = Query(None, description="Case-insensitive name fragment"),
):
    """
    Match ``name`` against the english, french, japanese and chinese names.
    """
    return await store.find(build_search_predicate(name))


@router.get(
    "/filter",
    response_model=PokemonPage,
    summary="Filter pokemon by type and statistics",
)
async def filter_pokemon(request: Request, store: Store) -> PokemonPage:
    """
    Filter by ``types`` (comma list) and ``min<Stat>``/``max<Stat>`` bounds,
    e.g. ``?types=Fire,Water&minHP=50&maxAttack=100&page=1&limit=20``.
    """
    params = request.query_params
    predicate = build_filter_predicate(parse_filter_params(params))
    page_request = parse_page_request(params.get("page"), params.get("limit"))
    return await paginate(store, predicate, page_request)


@router.get(
    "/by-ids",
    response_model=List[PokemonRecord],
    summary="Fetch several pokemon by id",
)
async def get_pokemon_by_ids(
    store: Store,
    ids: Optional[str] = Query(None, description="Comma-separated ids, e.g. 1,4,7"),
):
    ids_list = parse_id_list(ids)
    if not ids_list:
        return []
    return await store.find(IdIn(ids_list))


@router.get(
    "/list-all",
    response_model=List[PokemonSummary],
    summary="List every pokemon with id, english name, type and image",
)
async def list_all_pokemon(store: Store):
    return await store.list_summaries()


@router.post(
    "",
    response_model=PokemonRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create a pokemon",
)
async def create_pokemon(
    req: PokemonCreate,
    queue: Annotated[PokemonCreationQueue, Depends(get_creation_queue)],
):
    """
    Create a record with the next free id.

    Creation goes through the single-writer queue so concurrent requests
    never allocate the same id.
    """
    return await queue.submit(req)


# ---------------------------------------------------------------------
# Single-Record Routes
# ---------------------------------------------------------------------

@router.get(
    "/{pokemon_id}",
    response_model=PokemonRecord,
    summary="Get a pokemon by id",
)
async def get_pokemon(pokemon_id: str, store: Store):
    record = await store.find_one(IdEquals(parse_path_id(pokemon_id)))
    if record is None:
        raise PokemonNotFoundError()
    return record


@router.put(
    "/{pokemon_id}",
    response_model=PokemonRecord,
    summary="Update a pokemon",
)
async def update_pokemon(pokemon_id: str, req: PokemonUpdate, store: Store):
    """
    Replace the fields present in the body and re-validate the record.
    """
    key = parse_path_id(pokemon_id)

    current = await store.find_one(IdEquals(key))
    if current is None:
        raise PokemonNotFoundError()

    updated = await store.update(key, apply_update(key, current, req))
    if updated is None:
        raise PokemonNotFoundError()
    return updated


@router.delete(
    "/{pokemon_id}",
    response_model=DeletedPokemon,
    summary="Delete a pokemon",
)
async def delete_pokemon(pokemon_id: str, store: Store) -> DeletedPokemon:
    deleted = await store.delete(parse_path_id(pokemon_id))
    if deleted is None:
        raise PokemonNotFoundError()
    return DeletedPokemon(message="Pokemon deleted", pokemon=deleted)
