# vidtube/core/pagination.py
"""
Paginación uniforme para todos los listados: page/limit por query,
offset = (page-1)*limit, y un COUNT aparte con el mismo filtro.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from fastapi import Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

MAX_LIMIT = 100


@dataclass
class PageParams:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def page_meta(total: int, params: PageParams, total_key: str) -> dict:
    """
    Metadatos que acompañan a cada página:
    {total<Items>, currentPage, totalPages, limit}
    """
    return {
        total_key: total,
        "currentPage": params.page,
        "totalPages": total_pages(total, params.limit),
        "limit": params.limit,
    }


async def count_rows(db: AsyncSession, stmt: Select) -> int:
    """COUNT(*) sobre el mismo filtro del listado, sin orden ni límites."""
    sub = stmt.order_by(None).limit(None).offset(None).subquery()
    res = await db.execute(select(func.count()).select_from(sub))
    return int(res.scalar_one() or 0)


async def fetch_page(db: AsyncSession, stmt: Select, params: PageParams) -> tuple[list, int]:
    """
    Ejecuta la página y el conteo total. Las dos consultas no son atómicas
    entre sí; con escrituras concurrentes pueden no cuadrar.
    """
    total = await count_rows(db, stmt)
    res = await db.execute(stmt.limit(params.limit).offset(params.offset))
    return list(res.scalars()), total
