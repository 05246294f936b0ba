# vidtube/core/schemas.py
from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base de los schemas de salida: snake_case en Python, camelCase en JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class OwnerOut(CamelModel):
    id: int
    username: str
    full_name: str
    avatar: str | None = None
    # solo cuando el dueño es quien consulta
    email: str | None = None


class PageMeta(CamelModel):
    current_page: int
    total_pages: int
    limit: int


class Timestamped(CamelModel):
    created_at: datetime
    updated_at: datetime | None = None
