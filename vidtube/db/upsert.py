# vidtube/db/upsert.py
"""
INSERT ... ON CONFLICT para Postgres y SQLite.

`insert_ignore` (DO NOTHING) la usan el contador de vistas, los toggles de
like/suscripción y las playlists; `upsert` (DO UPDATE) el historial. El par
único lo protege la base de datos, no un SELECT previo.
"""
from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


async def insert_ignore(
    db: AsyncSession,
    model: Any,
    values: dict,
    index_elements: Sequence[str],
) -> int | None:
    """
    Inserta `values` salvo que ya exista una fila con el mismo valor en
    `index_elements`. Devuelve el id insertado o None si hubo conflicto.
    Cualquier otro error de la base de datos se propaga.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model)
    else:
        raise RuntimeError(f"insert_ignore no soporta el dialecto {dialect!r}")

    stmt = (
        stmt.values(**values)
        .on_conflict_do_nothing(index_elements=list(index_elements))
        .returning(model.id)
    )
    res = await db.execute(stmt)
    return res.scalar_one_or_none()


async def upsert(
    db: AsyncSession,
    model: Any,
    values: dict,
    index_elements: Sequence[str],
    update: Sequence[str],
) -> None:
    """
    INSERT ... ON CONFLICT DO UPDATE: si el par único ya existe solo se
    pisan las columnas de `update` con los valores nuevos.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model)
    else:
        raise RuntimeError(f"upsert no soporta el dialecto {dialect!r}")

    stmt = stmt.values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(index_elements),
        set_={col: stmt.excluded[col] for col in update},
    )
    await db.execute(stmt)
