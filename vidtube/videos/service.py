# vidtube/videos/service.py
"""
Lógica de videos: publicar, leer (con registro de vista), editar,
publicar/ocultar y borrar en cascada.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import settings
from vidtube.core.errors import BadRequestError, NotFoundError
from vidtube.core.guards import assert_owner
from vidtube.core.pagination import PageParams, fetch_page, page_meta
from vidtube.engagement.service import hydrate_channels, hydrate_video, hydrate_videos
from vidtube.media.storage import StoredMedia, discard_quietly, save_upload
from vidtube.users.models import User
from vidtube.users.repository import add_to_history, search_users
from vidtube.videos import repository as repo
from vidtube.videos.models import Video
from vidtube.videos.schemas import SORT_FIELDS, VideoOut

log = logging.getLogger("vidtube.videos")


@dataclass
class ViewRecord:
    counted: bool


async def record_view(
    db: AsyncSession,
    video_id: int,
    viewer_key: str,
    user_id: int | None = None,
) -> ViewRecord:
    """
    Registra una vista deduplicada por (video, espectador) en la ventana
    de VIEW_DEDUP_SECONDS.

    - Marca nueva -> views + 1.
    - Marca viva ya existente -> no cuenta (caso normal, no es error).
    - El historial del usuario se actualiza siempre, cuente o no la vista.
    """
    await repo.purge_expired_views(db)
    counted = await repo.insert_view(db, video_id, viewer_key)
    if counted:
        await repo.increment_views(db, video_id)
    if user_id is not None:
        await add_to_history(db, user_id, video_id)
    return ViewRecord(counted=counted)


async def list_videos(
    db: AsyncSession,
    params: PageParams,
    *,
    viewer_id: int | None,
    query: str | None = None,
    sort_by: str | None = None,
    sort_type: str | None = None,
    user_id: int | None = None,
) -> dict:
    if sort_by is not None and sort_by not in SORT_FIELDS:
        raise BadRequestError(f"sortBy must be one of {sorted(SORT_FIELDS)}")

    query = (query or "").strip() or None
    stmt = repo.videos_query(query=query, owner_id=user_id, sort_by=sort_by, sort_type=sort_type)
    videos, total = await fetch_page(db, stmt, params)

    channels = []
    if query:
        users = await search_users(db, query, settings.CHANNEL_SEARCH_LIMIT)
        channels = await hydrate_channels(db, users, viewer_id=viewer_id)

    return {
        "videos": await hydrate_videos(db, videos, viewer_id=viewer_id),
        "channels": channels,
        **page_meta(total, params, "totalVideos"),
    }


async def publish_video(
    db: AsyncSession,
    owner: User,
    *,
    title: str,
    description: str,
    video_file: UploadFile | None,
    thumbnail: UploadFile | None,
) -> VideoOut:
    title = (title or "").strip()
    if not title:
        raise BadRequestError("Title is required")
    if video_file is None or not video_file.filename:
        raise BadRequestError("Video file is required")
    if thumbnail is None or not thumbnail.filename:
        raise BadRequestError("Thumbnail file is required")

    stored_video: StoredMedia | None = None
    stored_thumb: StoredMedia | None = None
    try:
        stored_video = save_upload(video_file, "video")
        stored_thumb = save_upload(thumbnail, "thumbnail")
        video = await repo.create_video(
            db,
            owner_id=owner.id,
            title=title,
            description=(description or "").strip(),
            video_file=stored_video.url,
            thumbnail=stored_thumb.url,
            duration=stored_video.duration,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        # best-effort: lo ya subido no debe quedar huérfano
        discard_quietly(stored_video, stored_thumb)
        raise

    log.info("video publicado id=%s owner=%s", video.id, owner.id)
    return await hydrate_video(db, video, viewer_id=owner.id, with_comments=False)


async def get_video_for_viewer(
    db: AsyncSession,
    video_id: int,
    *,
    viewer_key: str,
    viewer_id: int | None,
) -> VideoOut:
    video = await repo.get_video(db, video_id)
    if not video:
        raise NotFoundError("Video not found")

    await record_view(db, video_id, viewer_key, viewer_id)
    await db.commit()
    await db.refresh(video)
    return await hydrate_video(db, video, viewer_id=viewer_id)


async def _owned_video(db: AsyncSession, video_id: int, actor_id: int) -> Video:
    video = await repo.get_video(db, video_id)
    assert_owner(video, actor_id, "Video")
    return video


async def update_video(
    db: AsyncSession,
    video_id: int,
    actor: User,
    *,
    title: str | None,
    description: str | None,
    thumbnail: UploadFile | None,
) -> VideoOut:
    video = await _owned_video(db, video_id, actor.id)

    has_thumb = thumbnail is not None and bool(thumbnail.filename)
    if title is None and description is None and not has_thumb:
        raise BadRequestError("Nothing to update: send title, description or thumbnail")
    if title is not None and not title.strip():
        raise BadRequestError("Title cannot be empty")

    stored_thumb: StoredMedia | None = None
    previous_thumb = video.thumbnail
    try:
        if has_thumb:
            stored_thumb = save_upload(thumbnail, "thumbnail")
            video.thumbnail = stored_thumb.url
        if title is not None:
            video.title = title.strip()
        if description is not None:
            video.description = description.strip()
        await db.commit()
    except Exception:
        await db.rollback()
        discard_quietly(stored_thumb)
        raise

    if stored_thumb is not None:
        discard_quietly(previous_thumb)
    await db.refresh(video)
    return await hydrate_video(db, video, viewer_id=actor.id)


async def toggle_publish(db: AsyncSession, video_id: int, actor: User) -> Video:
    video = await _owned_video(db, video_id, actor.id)
    video.is_published = not video.is_published
    await db.commit()
    await db.refresh(video)
    return video


async def delete_video(db: AsyncSession, video_id: int, actor: User) -> None:
    video = await _owned_video(db, video_id, actor.id)
    media = (video.video_file, video.thumbnail)

    try:
        await repo.delete_video_cascade(db, video.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log.info("video borrado id=%s owner=%s", video_id, actor.id)
    # fuera de la transacción: si el almacenamiento falla, solo se loguea
    discard_quietly(*media)
