# vidtube/media/streaming.py
"""
Sirve lo subido bajo MEDIA_URL (por defecto /media).

Los nombres son uuid, así que un archivo nunca cambia de contenido: cache
larga e inmutable, y ETag por mtime+tamaño para revalidar barato.
"""
from __future__ import annotations

import hashlib
import os
from email.utils import formatdate
from mimetypes import guess_type

from fastapi import APIRouter, Request
from starlette.responses import FileResponse, Response

from vidtube.core.config import settings
from vidtube.core.errors import NotFoundError

router = APIRouter(prefix=settings.MEDIA_URL.rstrip("/"), tags=["media"])


def _resolve(path: str) -> tuple[str, os.stat_result]:
    base = os.path.realpath(settings.MEDIA_DIR)
    target = os.path.realpath(os.path.join(base, path))
    # ../ o symlinks fuera de MEDIA_DIR cuentan como inexistentes
    if not target.startswith(base + os.sep) or not os.path.isfile(target):
        raise NotFoundError("File not found")
    return target, os.stat(target)


def _file_headers(target: str, st: os.stat_result) -> dict[str, str]:
    content_type, _ = guess_type(target)
    tag = hashlib.md5(f"{st.st_mtime_ns}:{st.st_size}".encode()).hexdigest()
    return {
        "ETag": f'"{tag}"',
        "Last-Modified": formatdate(st.st_mtime, usegmt=True),
        "Content-Type": content_type or "application/octet-stream",
        "Cache-Control": "public, max-age=31536000, immutable",
        "Accept-Ranges": "bytes",
        "Cross-Origin-Resource-Policy": "cross-origin",
    }


def _not_modified(request: Request, headers: dict[str, str]) -> Response | None:
    if request.headers.get("if-none-match") == headers["ETag"]:
        return Response(status_code=304, headers=headers)
    return None


@router.head("/{path:path}")
async def media_head(path: str, request: Request):
    target, st = _resolve(path)
    headers = _file_headers(target, st)
    cached = _not_modified(request, headers)
    if cached is not None:
        return cached
    return Response(status_code=200, headers={**headers, "Content-Length": str(st.st_size)})


@router.get("/{path:path}")
async def media_get(path: str, request: Request):
    target, st = _resolve(path)
    headers = _file_headers(target, st)
    cached = _not_modified(request, headers)
    if cached is not None:
        return cached
    # Range (206) y sendfile los resuelve FileResponse
    return FileResponse(target, headers=headers, stat_result=st)
