# vidtube/core/guards.py
from typing import Any

from vidtube.core.errors import ForbiddenError, NotFoundError


def assert_owner(entity: Any, actor_id: int | str, name: str = "Resource") -> None:
    """
    404 si la entidad no existe (se comprueba primero), 403 si el
    owner_id no coincide con quien hace la petición.
    """
    if entity is None:
        raise NotFoundError(f"{name} not found")
    if str(entity.owner_id) != str(actor_id):
        raise ForbiddenError(f"You are not allowed to modify this {name.lower()}")
