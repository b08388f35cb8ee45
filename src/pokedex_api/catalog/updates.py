"""
Record updates.

Applies a partial update to a stored document and re-validates the result
against the full record schema before it is persisted.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError

from ..api.models import PokemonRecord, PokemonUpdate
from ..core.errors import CatalogValidationError, format_validation_errors


def apply_update(
    pokemon_id: int,
    current: Dict[str, Any],
    changes: PokemonUpdate,
) -> Dict[str, Any]:
    """
    Replace the top-level fields present in ``changes`` and validate.

    A body ``id`` equal to ``pokemon_id`` is accepted as a no-op; ids are
    immutable, so any other value is rejected.

    Raises
    ------
    CatalogValidationError
        If the id would change or the merged document violates the schema.
    """
    fields = changes.model_dump(exclude_unset=True)

    new_id = fields.pop("id", pokemon_id)
    if new_id != pokemon_id:
        raise CatalogValidationError(
            f"The id of pokemon {pokemon_id} cannot be changed to {new_id}"
        )

    merged = {**current, **fields, "id": pokemon_id}
    try:
        return PokemonRecord.model_validate(merged).model_dump()
    except ValidationError as exc:
        raise CatalogValidationError(format_validation_errors(exc.errors())) from None
