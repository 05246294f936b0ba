# vidtube/core/deps.py
"""
Dependencias de autenticación compartidas por todos los routers.

El token se busca primero en `Authorization: Bearer ...` y luego en la
cookie `accessToken`. Un token en la lista negra vale lo mismo que ninguno.
"""
from __future__ import annotations

from fastapi import Depends, Header, Request
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import UnauthorizedError
from vidtube.core.security import decode_access_token
from vidtube.db.session import get_session
from vidtube.users.models import User
from vidtube.users.repository import get_by_id, is_token_blacklisted


def _extract_token(request: Request, authorization: str | None) -> str | None:
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    return request.cookies.get("accessToken") or None


async def _resolve_user(db: AsyncSession, token: str) -> User:
    try:
        user_id = int(decode_access_token(token))
    except (JWTError, ValueError):
        raise UnauthorizedError("Invalid access token")

    if await is_token_blacklisted(db, token):
        raise UnauthorizedError("Token has been revoked")

    user = await get_by_id(db, user_id)
    if not user:
        raise UnauthorizedError("Invalid access token")
    return user


async def get_access_token(
    request: Request,
    authorization: str | None = Header(None),
) -> str:
    token = _extract_token(request, authorization)
    if not token:
        raise UnauthorizedError("Unauthorized request")
    return token


async def get_current_user(
    token: str = Depends(get_access_token),
    db: AsyncSession = Depends(get_session),
) -> User:
    return await _resolve_user(db, token)


async def get_optional_user(
    request: Request,
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_session),
) -> User | None:
    """
    Igual que get_current_user pero sin exigir sesión: si no hay token o
    no es válido la petición sigue como anónima.
    """
    token = _extract_token(request, authorization)
    if not token:
        return None
    try:
        return await _resolve_user(db, token)
    except UnauthorizedError:
        return None


def viewer_key(request: Request, user: User | None) -> str:
    """Clave del espectador para deduplicar vistas: id de usuario o IP."""
    if user is not None:
        return str(user.id)
    client = request.client
    return f"ip:{client.host}" if client else "ip:unknown"
