# vidtube/playlists/service.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import BadRequestError, NotFoundError
from vidtube.core.guards import assert_owner
from vidtube.core.pagination import PageParams, fetch_page, page_meta
from vidtube.engagement.service import hydrate_videos, owner_snippets
from vidtube.playlists import repository as repo
from vidtube.playlists.models import Playlist
from vidtube.playlists.schemas import PlaylistCreate, PlaylistOut, PlaylistUpdate
from vidtube.users.models import User
from vidtube.users.repository import get_by_id
from vidtube.videos.repository import get_video

log = logging.getLogger("vidtube.playlists")


async def hydrate_playlist(
    db: AsyncSession, playlist: Playlist, viewer_id: int, *, with_videos: bool = True
) -> PlaylistOut:
    owners = await owner_snippets(db, [playlist.owner_id], viewer_id)
    counts = await repo.video_counts(db, [playlist.id], viewer_id)
    videos = []
    if with_videos:
        rows = await repo.playlist_videos(db, playlist.id, viewer_id)
        videos = await hydrate_videos(db, rows, viewer_id=viewer_id)
    return PlaylistOut(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner=owners[playlist.owner_id],
        total_videos=counts.get(playlist.id, 0),
        videos=videos,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


async def create_playlist(db: AsyncSession, owner: User, data: PlaylistCreate) -> PlaylistOut:
    playlist = await repo.create_playlist(db, owner.id, data.name.strip(), data.description.strip())
    await db.commit()
    return await hydrate_playlist(db, playlist, owner.id)


async def user_playlists(db: AsyncSession, user_id: int, viewer: User, params: PageParams) -> dict:
    if not await get_by_id(db, user_id):
        raise NotFoundError("User not found")

    playlists, total = await fetch_page(db, repo.playlists_query(user_id), params)
    owners = await owner_snippets(db, [user_id], viewer.id)
    counts = await repo.video_counts(db, [p.id for p in playlists], viewer.id)
    items = [
        PlaylistOut(
            id=p.id,
            name=p.name,
            description=p.description,
            owner=owners[p.owner_id],
            total_videos=counts.get(p.id, 0),
            created_at=p.created_at,
            updated_at=p.updated_at,
        )
        for p in playlists
    ]
    return {"playlists": items, **page_meta(total, params, "totalPlaylists")}


async def get_playlist(db: AsyncSession, playlist_id: int, viewer: User) -> PlaylistOut:
    playlist = await repo.get_playlist(db, playlist_id)
    if not playlist:
        raise NotFoundError("Playlist not found")
    return await hydrate_playlist(db, playlist, viewer.id)


async def update_playlist(db: AsyncSession, playlist_id: int, actor: User, data: PlaylistUpdate) -> PlaylistOut:
    playlist = await repo.get_playlist(db, playlist_id)
    assert_owner(playlist, actor.id, "Playlist")
    if data.name is not None:
        playlist.name = data.name.strip()
    if data.description is not None:
        playlist.description = data.description.strip()
    await db.commit()
    await db.refresh(playlist)
    return await hydrate_playlist(db, playlist, actor.id)


async def delete_playlist(db: AsyncSession, playlist_id: int, actor: User) -> None:
    playlist = await repo.get_playlist(db, playlist_id)
    assert_owner(playlist, actor.id, "Playlist")
    try:
        await repo.delete_playlist_cascade(db, playlist_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    log.info("playlist borrada id=%s", playlist_id)


async def add_video(db: AsyncSession, playlist_id: int, video_id: int, actor: User) -> PlaylistOut:
    playlist = await repo.get_playlist(db, playlist_id)
    assert_owner(playlist, actor.id, "Playlist")
    if not await get_video(db, video_id):
        raise NotFoundError("Video not found")

    # si ya estaba no pasa nada
    await repo.add_video(db, playlist_id, video_id)
    await db.commit()
    return await hydrate_playlist(db, playlist, actor.id)


async def remove_video(db: AsyncSession, playlist_id: int, video_id: int, actor: User) -> PlaylistOut:
    playlist = await repo.get_playlist(db, playlist_id)
    assert_owner(playlist, actor.id, "Playlist")

    if not await repo.remove_video(db, playlist_id, video_id):
        raise BadRequestError("Video is not in the playlist")
    await db.commit()
    return await hydrate_playlist(db, playlist, actor.id)
