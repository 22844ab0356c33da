from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from supplychain.app.schemas.common import Page


def sorted_by(stmt: Select, model: Any, sort_by: str | None = None, direction: str = "asc") -> Select:
    """
    Ajoute un ORDER BY sur une colonne du modèle.

    Colonne inconnue ou absente : tri par id, pour une pagination stable.
    """
    column = model.__table__.columns.get(sort_by) if sort_by else None
    if column is None:
        column = model.__table__.columns["id"]
    return stmt.order_by(column.desc() if direction.lower() == "desc" else column.asc())


def paginate(db: Session, stmt: Select, page: int = 0, size: int = 10) -> Page:
    """Exécute ``stmt`` pour une page (0-based) et compte le total."""
    total = db.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar_one()
    items = db.execute(stmt.offset(page * size).limit(size)).scalars().all()
    return Page(items=list(items), page=page, size=size, total=int(total))


def contains_ignore_case(column, text: str):
    """``column ILIKE '%text%'`` avec échappement des jokers SQL."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")
