"""
API Models for the Pokedex Catalog

Pydantic models used for request/response validation across the catalog
endpoints. The record schema is enforced explicitly at the write boundary:
the store keeps documents, these models decide what a valid document is.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

# Numbers only; booleans and numeric strings are rejected.
Stat = Union[StrictInt, StrictFloat]


# ---------------------------------------------------------------------
# Record Components
# ---------------------------------------------------------------------

class PokemonName(BaseModel):
    """
    Localized names of a record. All four languages are required.
    """
    english: StrictStr
    french: StrictStr
    japanese: StrictStr
    chinese: StrictStr


class BaseStats(BaseModel):
    """
    The six battle statistics. NaN and infinities are rejected.
    """
    HP: Stat
    Attack: Stat
    Defense: Stat
    SpecialAttack: Stat
    SpecialDefense: Stat
    Speed: Stat

    model_config = ConfigDict(allow_inf_nan=False)


# ---------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------

class PokemonRecord(BaseModel):
    """
    Full representation of a stored record.
    """
    id: StrictInt
    name: PokemonName
    type: List[StrictStr] = Field(..., min_length=1)
    base: BaseStats
    image: StrictStr


class PokemonCreate(BaseModel):
    """
    Body of ``POST /pokemon``. The id is always assigned by the server.
    """
    name: PokemonName
    type: List[StrictStr] = Field(..., min_length=1)
    base: BaseStats
    image: Optional[StrictStr] = None

    model_config = ConfigDict(extra="ignore")


class PokemonUpdate(BaseModel):
    """
    Body of ``PUT /pokemon/{id}``.

    Only the fields present in the request replace the stored ones; the
    merged document is validated as a ``PokemonRecord`` before persisting.
    """
    id: Optional[StrictInt] = None
    name: Optional[PokemonName] = None
    type: Optional[List[StrictStr]] = None
    base: Optional[BaseStats] = None
    image: Optional[StrictStr] = None

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------
# Projections & Envelopes
# ---------------------------------------------------------------------

class EnglishName(BaseModel):
    english: str


class PokemonSummary(BaseModel):
    """
    Projection returned by ``GET /pokemon/list-all``.
    """
    id: int
    name: EnglishName
    type: List[str]
    image: str


class PokemonPage(BaseModel):
    """
    Paginated envelope returned by listing and filter endpoints.
    """
    pokemons: List[PokemonRecord]
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


class DeletedPokemon(BaseModel):
    """
    Result of ``DELETE /pokemon/{id}``.
    """
    message: str
    pokemon: PokemonRecord
