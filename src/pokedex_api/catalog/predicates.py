"""
Predicate Tree

Store-agnostic filter conditions produced by the query builders and
evaluated by the record store. Nodes are immutable so that identical
requests produce equal predicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

# Statistic fields of ``Pokemon.base``, in display order.
STAT_FIELDS: Tuple[str, ...] = (
    "HP",
    "Attack",
    "Defense",
    "SpecialAttack",
    "SpecialDefense",
    "Speed",
)

NAME_LANGUAGES: Tuple[str, ...] = ("english", "french", "japanese", "chinese")

# Escape character used by NameLike patterns.
LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class MatchAll:
    """Matches every record."""


@dataclass(frozen=True)
class IdEquals:
    id: int


@dataclass(frozen=True)
class IdIn:
    ids: Tuple[int, ...]


@dataclass(frozen=True)
class TypeIn:
    """Record's type list contains at least one of ``values``."""

    values: Tuple[str, ...]


@dataclass(frozen=True)
class StatRange:
    """Inclusive bounds on ``base.<stat>``; a missing bound is open."""

    stat: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None


@dataclass(frozen=True)
class NameLike:
    """
    Case-insensitive LIKE match on ``name.<language>``.

    ``pattern`` uses ``%``/``_`` wildcards and ``LIKE_ESCAPE`` for literals.
    """

    language: str
    pattern: str


@dataclass(frozen=True)
class AllOf:
    clauses: Tuple["Predicate", ...]


@dataclass(frozen=True)
class AnyOf:
    clauses: Tuple["Predicate", ...]


Predicate = Union[MatchAll, IdEquals, IdIn, TypeIn, StatRange, NameLike, AllOf, AnyOf]


def all_of(*clauses: Predicate) -> Predicate:
    """AND the clauses, collapsing the empty and single-clause cases."""
    if not clauses:
        return MatchAll()
    if len(clauses) == 1:
        return clauses[0]
    return AllOf(tuple(clauses))
