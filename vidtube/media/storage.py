# vidtube/media/storage.py
"""
Almacenamiento de media en disco bajo MEDIA_DIR, servido desde /media.

Contrato: save_upload -> StoredMedia(url, public_id, duration),
delete_media(public_id) y public_id_from_url(url). El public_id es la ruta
relativa sin extensión, p. ej. 'videos/3f2a...'.
"""
from __future__ import annotations

import glob
import json
import logging
import os
import shutil
import subprocess
import uuid
from dataclasses import dataclass
from urllib.parse import urlparse

from fastapi import UploadFile

from vidtube.core.config import settings
from vidtube.core.errors import BadRequestError, UpstreamError

log = logging.getLogger("vidtube.media")

VIDEO_EXTS = {".mp4", ".m4v", ".mov", ".3gp", ".3gpp", ".webm", ".mkv"}
IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

# tipo de subida -> (carpeta, ¿es video?)
KINDS = {
    "video": ("videos", True),
    "thumbnail": ("thumbnails", False),
    "avatar": ("avatars", False),
    "cover": ("covers", False),
}


@dataclass
class StoredMedia:
    url: str
    public_id: str
    duration: float = 0.0


def _media_dir() -> str:
    return settings.MEDIA_DIR


def _is_video(upload: UploadFile, ext: str) -> bool:
    ct = (upload.content_type or "").lower()
    return ct.startswith("video/") or ext in VIDEO_EXTS


def _is_image(upload: UploadFile, ext: str) -> bool:
    ct = (upload.content_type or "").lower()
    return ct.startswith("image/") or ext in IMAGE_EXTS


def _probe_duration(abs_path: str) -> float:
    """
    Duración en segundos con ffprobe. Si ffprobe no está en PATH o falla,
    devuelve 0.0: la duración es informativa.
    """
    ffprobe = shutil.which("ffprobe")
    if not ffprobe:
        return 0.0
    cmd = [
        ffprobe,
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "json",
        abs_path,
    ]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
        if proc.returncode != 0:
            log.warning("ffprobe falló para %s: %s", abs_path, proc.stderr.strip())
            return 0.0
        data = json.loads(proc.stdout or "{}")
        return round(float(data.get("format", {}).get("duration", 0.0)), 2)
    except (subprocess.TimeoutExpired, ValueError, OSError) as e:
        log.warning("no se pudo leer la duración de %s: %r", abs_path, e)
        return 0.0


def to_media_url(rel: str) -> str:
    return f"{settings.MEDIA_URL.rstrip('/')}/{rel}"


def public_id_from_url(url: str | None) -> str | None:
    """
    '/media/videos/abc.mp4' o 'http://host/media/videos/abc.mp4' -> 'videos/abc'.
    Devuelve None si la URL no apunta a nuestro almacenamiento.
    """
    if not url:
        return None
    path = urlparse(url).path
    prefix = settings.MEDIA_URL.rstrip("/") + "/"
    if not path.startswith(prefix):
        return None
    rel = path[len(prefix):]
    stem, _ = os.path.splitext(rel)
    return stem or None


def save_upload(file: UploadFile, kind: str) -> StoredMedia:
    """
    Copia el UploadFile a MEDIA_DIR/<carpeta>/<uuid><ext>.
    - kind 'video' exige un video; el resto exige una imagen (400 si no).
    - Para videos se intenta leer la duración con ffprobe.
    """
    subdir, wants_video = KINDS[kind]
    ext = os.path.splitext(file.filename or "")[1].lower()

    if wants_video and not _is_video(file, ext):
        raise BadRequestError(f"{kind} must be a video file")
    if not wants_video and not _is_image(file, ext):
        raise BadRequestError(f"{kind} must be an image file")

    if wants_video and ext not in VIDEO_EXTS:
        ext = ".mp4"
    if not wants_video and ext not in IMAGE_EXTS:
        ext = ".jpg"

    os.makedirs(os.path.join(_media_dir(), subdir), exist_ok=True)
    name = uuid.uuid4().hex
    rel = f"{subdir}/{name}{ext}"
    abs_path = os.path.join(_media_dir(), rel)
    try:
        with open(abs_path, "wb") as out:
            shutil.copyfileobj(file.file, out)
    except OSError as e:
        raise UpstreamError(f"Error storing {kind}") from e

    duration = _probe_duration(abs_path) if wants_video else 0.0
    return StoredMedia(url=to_media_url(rel), public_id=f"{subdir}/{name}", duration=duration)


def delete_media(public_id: str | None) -> bool:
    """
    Borra los archivos de un public_id (cualquier extensión).
    No lanza error si ya no están; devuelve True si borró algo.
    """
    if not public_id:
        return False
    base = os.path.realpath(_media_dir())
    deleted = False
    for abs_path in glob.glob(os.path.join(base, glob.escape(public_id)) + ".*"):
        # nunca fuera de MEDIA_DIR
        if not os.path.realpath(abs_path).startswith(base + os.sep):
            continue
        try:
            os.remove(abs_path)
            deleted = True
        except FileNotFoundError:
            pass
    return deleted


def discard_quietly(*items: StoredMedia | str | None) -> None:
    """
    Limpieza best-effort (subidas huérfanas, media de un video borrado).
    Acepta StoredMedia o URLs; los fallos solo se loguean.
    """
    for item in items:
        if item is None:
            continue
        public_id = item.public_id if isinstance(item, StoredMedia) else public_id_from_url(item)
        try:
            delete_media(public_id)
        except OSError as e:
            log.warning("no se pudo borrar media %s: %r", public_id, e)
