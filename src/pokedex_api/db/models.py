"""
SQLAlchemy Models

A single ``pokemon`` table holding each record as JSONB documents next to
its logical id. The internal primary key ``pk`` is never exposed; every
API operation addresses records by ``id``.
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import Integer, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Pokemon(Base):
    """
    One catalog record.
    """
    __tablename__ = "pokemon"

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[int] = mapped_column("pokemon_id", Integer, nullable=False, unique=True, index=True)
    name: Mapped[Dict[str, Any]] = mapped_column(JSONB, nullable=False)
    type: Mapped[List[str]] = mapped_column(JSONB, nullable=False)
    base: Mapped[Dict[str, Any]] = mapped_column(JSONB, nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": dict(self.name),
            "type": list(self.type),
            "base": dict(self.base),
            "image": self.image,
        }
