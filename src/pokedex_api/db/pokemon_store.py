"""
Pokemon Store

PostgreSQL-backed record store. Translates catalog predicate trees into
SQLAlchemy expressions over the JSONB document columns and exposes the
find/count/insert/update/delete primitives the catalog engines rely on.

Every read is ordered by ``id`` ascending. Driver and SQL failures are
re-raised as ``StoreError`` with the underlying message.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import and_, false, func, or_, select, true
from sqlalchemy.dialects.postgresql import array
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from ..catalog.predicates import (
    LIKE_ESCAPE,
    AllOf,
    AnyOf,
    IdEquals,
    IdIn,
    MatchAll,
    NameLike,
    Predicate,
    StatRange,
    TypeIn,
)
from ..core.errors import StoreError
from .models import Pokemon


# ---------------------------------------------------------------------
# Predicate Compilation
# ---------------------------------------------------------------------

def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    """
    Translate a predicate tree into a SQLAlchemy boolean expression.
    """
    if isinstance(predicate, MatchAll):
        return true()

    if isinstance(predicate, IdEquals):
        return Pokemon.id == predicate.id

    if isinstance(predicate, IdIn):
        if not predicate.ids:
            return false()
        return Pokemon.id.in_(predicate.ids)

    if isinstance(predicate, TypeIn):
        # JSONB ?| : the type array contains any of the listed strings
        return Pokemon.type.has_any(array(list(predicate.values)))

    if isinstance(predicate, StatRange):
        stat = Pokemon.base[predicate.stat].as_float()
        conditions = []
        if predicate.minimum is not None:
            conditions.append(stat >= predicate.minimum)
        if predicate.maximum is not None:
            conditions.append(stat <= predicate.maximum)
        return and_(*conditions) if conditions else true()

    if isinstance(predicate, NameLike):
        return Pokemon.name[predicate.language].as_string().ilike(
            predicate.pattern, escape=LIKE_ESCAPE
        )

    if isinstance(predicate, AllOf):
        return and_(*(compile_predicate(c) for c in predicate.clauses))

    if isinstance(predicate, AnyOf):
        return or_(*(compile_predicate(c) for c in predicate.clauses))

    raise TypeError(f"Unsupported predicate: {predicate!r}")


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        message = str(getattr(exc, "orig", None) or exc)
        raise StoreError(message) from exc


# ---------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------

class PokemonStore:
    """
    Document-style access to the ``pokemon`` table.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize with an async database session.

        Parameters
        ----------
        session : AsyncSession
            SQLAlchemy async session for database operations.
        """
        self._session = session

    async def commit(self) -> None:
        """
        Commit the current transaction.
        """
        with _store_errors():
            await self._session.commit()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def count(self, predicate: Predicate) -> int:
        stmt = select(func.count()).select_from(Pokemon).where(compile_predicate(predicate))
        with _store_errors():
            result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def find(
        self,
        predicate: Predicate,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return matching records ordered by id ascending.

        Parameters
        ----------
        predicate : Predicate
            Filter condition.
        skip : int
            Number of leading matches to skip.
        limit : Optional[int]
            Maximum number of records to return; None for all.
        """
        stmt = (
            select(Pokemon)
            .where(compile_predicate(predicate))
            .order_by(Pokemon.id.asc())
        )
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        with _store_errors():
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        return [row.to_document() for row in rows]

    async def find_one(self, predicate: Predicate) -> Optional[Dict[str, Any]]:
        records = await self.find(predicate, limit=1)
        return records[0] if records else None

    async def list_summaries(self) -> List[Dict[str, Any]]:
        """
        Return every record projected to id, english name, type and image.
        """
        stmt = select(
            Pokemon.id,
            Pokemon.name["english"].as_string().label("english"),
            Pokemon.type,
            Pokemon.image,
        ).order_by(Pokemon.id.asc())

        with _store_errors():
            result = await self._session.execute(stmt)
            rows = result.all()

        return [
            {
                "id": row.id,
                "name": {"english": row.english},
                "type": list(row.type),
                "image": row.image,
            }
            for row in rows
        ]

    async def max_id(self) -> Optional[int]:
        """
        Return the highest id currently stored, or None when empty.
        """
        stmt = select(Pokemon.id).order_by(Pokemon.id.desc()).limit(1)
        with _store_errors():
            return await self._session.scalar(stmt)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _get_row(self, pokemon_id: int) -> Optional[Pokemon]:
        stmt = select(Pokemon).where(Pokemon.id == pokemon_id)
        return await self._session.scalar(stmt)

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a complete, already validated document.
        """
        record = Pokemon(
            id=document["id"],
            name=document["name"],
            type=document["type"],
            base=document["base"],
            image=document["image"],
        )
        with _store_errors():
            self._session.add(record)
            await self._session.flush()
        return record.to_document()

    async def update(
        self,
        pokemon_id: int,
        document: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Replace the stored fields of the record with ``pokemon_id``.

        Returns the updated document, or None if no such record exists.
        """
        with _store_errors():
            record = await self._get_row(pokemon_id)
            if record is None:
                return None

            record.id = document["id"]
            record.name = document["name"]
            record.type = document["type"]
            record.base = document["base"]
            record.image = document["image"]
            await self._session.flush()
        return record.to_document()

    async def delete(self, pokemon_id: int) -> Optional[Dict[str, Any]]:
        """
        Delete the record with ``pokemon_id`` and return it, or None.
        """
        with _store_errors():
            record = await self._get_row(pokemon_id)
            if record is None:
                return None

            document = record.to_document()
            await self._session.delete(record)
            await self._session.flush()
        return document
