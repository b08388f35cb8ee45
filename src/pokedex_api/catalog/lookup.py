"""
Batch Lookup

Parsing for ``GET /pokemon/by-ids``. Malformed tokens are dropped rather
than rejected so a partially bad list still returns the valid records.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from ..core.errors import CatalogValidationError


def parse_id_list(raw: Optional[str]) -> Tuple[int, ...]:
    """
    Parse a comma-separated id list.

    Returns an empty tuple for empty or wholly invalid input.

    Raises
    ------
    CatalogValidationError
        If the parameter is absent altogether.
    """
    if raw is None:
        raise CatalogValidationError('The "ids" parameter is required')

    ids = []
    seen = set()
    for token in raw.split(","):
        value = _numeric_id(token.strip())
        if value is None or value in seen:
            continue
        seen.add(value)
        ids.append(value)
    return tuple(ids)


def _numeric_id(token: str) -> Optional[int]:
    """Integral value of ``token`` (``"4"``, ``"4.0"``, ``"4e0"``), else None."""
    try:
        return int(token)
    except ValueError:
        pass
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    return int(value)


def parse_path_id(raw: str) -> int:
    """
    Parse the ``{id}`` path segment of single-record routes.
    """
    try:
        return int(raw.strip())
    except ValueError:
        raise CatalogValidationError(f'Invalid pokemon id "{raw}"') from None
