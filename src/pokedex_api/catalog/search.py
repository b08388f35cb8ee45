"""
Search Matcher

Builds the predicate for ``GET /pokemon/search``: a case-insensitive
substring match of one term against all four localized names.
"""

from __future__ import annotations

from typing import Optional

from ..core.errors import CatalogValidationError
from .predicates import LIKE_ESCAPE, NAME_LANGUAGES, AnyOf, NameLike, Predicate


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term is matched as literal text."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_search_predicate(term: Optional[str]) -> Predicate:
    """
    Match records whose english, french, japanese or chinese name contains
    ``term``.

    Raises
    ------
    CatalogValidationError
        If the term is missing or blank.
    """
    if term is None or not term.strip():
        raise CatalogValidationError('The "name" parameter is required')

    pattern = f"%{escape_like(term)}%"
    return AnyOf(tuple(NameLike(language, pattern) for language in NAME_LANGUAGES))
