"""
Filter Builder

Translates the loosely-typed query parameters of ``GET /pokemon/filter``
into a typed ``CatalogFilter`` and then into a predicate tree.

Query Parameters
----------------
- ``types``            : comma-separated type names (membership test)
- ``min<Stat>``        : inclusive lower bound, e.g. ``minHP=50``
- ``max<Stat>``        : inclusive upper bound, e.g. ``maxSpeed=100``

Parsing happens before any query is built: an unparseable bound is a
validation error, never a clause that silently matches nothing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from ..core.errors import CatalogValidationError
from .predicates import STAT_FIELDS, Predicate, StatRange, TypeIn, all_of


@dataclass(frozen=True)
class StatBounds:
    minimum: Optional[float] = None
    maximum: Optional[float] = None


@dataclass(frozen=True)
class CatalogFilter:
    types: Tuple[str, ...] = ()
    stats: Dict[str, StatBounds] = field(default_factory=dict)


# ---------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------

def parse_type_list(raw: Optional[str]) -> Tuple[str, ...]:
    """
    Split a comma-separated type list, dropping blank tokens and duplicates
    while keeping first-seen order.
    """
    if not raw:
        return ()
    seen = []
    for token in raw.split(","):
        token = token.strip()
        if token and token not in seen:
            seen.append(token)
    return tuple(seen)


def parse_bound(param: str, raw: Optional[str]) -> Optional[float]:
    """
    Parse a statistic bound.

    Raises
    ------
    CatalogValidationError
        If the value is not a finite number.
    """
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        raise CatalogValidationError(
            f'The "{param}" parameter must be a number, got "{raw}"'
        ) from None
    if not math.isfinite(value):
        raise CatalogValidationError(
            f'The "{param}" parameter must be a finite number, got "{raw}"'
        )
    return value


def parse_filter_params(params: Mapping[str, str]) -> CatalogFilter:
    """
    Build a CatalogFilter from raw query parameters.

    Keys other than ``types`` and the ``min*``/``max*`` stat bounds are
    ignored.
    """
    stats: Dict[str, StatBounds] = {}
    for stat in STAT_FIELDS:
        minimum = parse_bound(f"min{stat}", params.get(f"min{stat}"))
        maximum = parse_bound(f"max{stat}", params.get(f"max{stat}"))
        if minimum is not None or maximum is not None:
            stats[stat] = StatBounds(minimum=minimum, maximum=maximum)

    return CatalogFilter(types=parse_type_list(params.get("types")), stats=stats)


# ---------------------------------------------------------------------
# Predicate Construction
# ---------------------------------------------------------------------

def build_filter_predicate(catalog_filter: CatalogFilter) -> Predicate:
    """
    AND together one clause per constrained field; an empty filter is
    ``MatchAll``.
    """
    clauses = []
    if catalog_filter.types:
        clauses.append(TypeIn(catalog_filter.types))

    for stat in STAT_FIELDS:
        bounds = catalog_filter.stats.get(stat)
        if bounds is not None:
            clauses.append(StatRange(stat, bounds.minimum, bounds.maximum))

    return all_of(*clauses)
