from __future__ import annotations

from dataclasses import dataclass
from typing import Generator, Literal

from fastapi import Query

from supplychain.app.db.session import SessionLocal


def get_db() -> Generator:
    # pas de commit ici : l'endpoint commit, sinon close() annule tout
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@dataclass
class PageParams:
    page: int = 0
    size: int = 10
    sort_by: str | None = None
    direction: str = "asc"


def page_params(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    sort_by: str | None = Query(default=None),
    direction: Literal["asc", "desc"] = Query(default="asc"),
) -> PageParams:
    return PageParams(page=page, size=size, sort_by=sort_by, direction=direction)


def get_session_factory():
    """Fabrique de sessions pour les jobs hors requête (scan stock bas)."""
    return SessionLocal
