# vidtube/playlists/repository.py
from sqlalchemy import Select, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.base import utcnow
from vidtube.db.upsert import insert_ignore
from vidtube.playlists.models import Playlist, PlaylistVideo
from vidtube.videos.models import Video


async def create_playlist(db: AsyncSession, owner_id: int, name: str, description: str) -> Playlist:
    playlist = Playlist(owner_id=owner_id, name=name, description=description)
    db.add(playlist)
    await db.flush()
    await db.refresh(playlist)
    return playlist


async def get_playlist(db: AsyncSession, playlist_id: int) -> Playlist | None:
    res = await db.execute(select(Playlist).where(Playlist.id == playlist_id))
    return res.scalar_one_or_none()


def playlists_query(owner_id: int) -> Select:
    return (
        select(Playlist)
        .where(Playlist.owner_id == owner_id)
        .order_by(desc(Playlist.created_at), desc(Playlist.id))
    )


def _visible_to(viewer_id: int | None):
    """Publicados para todos; los ocultos solo para su dueño."""
    if viewer_id is None:
        return Video.is_published.is_(True)
    return or_(Video.is_published.is_(True), Video.owner_id == viewer_id)


async def video_counts(db: AsyncSession, playlist_ids: list[int], viewer_id: int | None) -> dict[int, int]:
    """Cuenta lo mismo que playlist_videos devuelve a ese espectador."""
    if not playlist_ids:
        return {}
    res = await db.execute(
        select(PlaylistVideo.playlist_id, func.count(PlaylistVideo.id))
        .join(Video, Video.id == PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id.in_(playlist_ids), _visible_to(viewer_id))
        .group_by(PlaylistVideo.playlist_id)
    )
    return {row[0]: int(row[1]) for row in res.all()}


async def playlist_videos(db: AsyncSession, playlist_id: int, viewer_id: int | None) -> list[Video]:
    """
    Videos en orden de inserción. Los no publicados solo los ve su dueño.
    """
    stmt = (
        select(Video)
        .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
        .where(PlaylistVideo.playlist_id == playlist_id, _visible_to(viewer_id))
        .order_by(PlaylistVideo.position, PlaylistVideo.id)
    )
    res = await db.execute(stmt)
    return list(res.scalars())


async def add_video(db: AsyncSession, playlist_id: int, video_id: int) -> bool:
    """Conjunto: False si el video ya estaba (no hace nada)."""
    res = await db.execute(
        select(func.coalesce(func.max(PlaylistVideo.position), -1)).where(
            PlaylistVideo.playlist_id == playlist_id
        )
    )
    next_pos = int(res.scalar_one()) + 1
    inserted = await insert_ignore(
        db,
        PlaylistVideo,
        {"playlist_id": playlist_id, "video_id": video_id, "position": next_pos, "added_at": utcnow()},
        index_elements=("playlist_id", "video_id"),
    )
    return inserted is not None


async def remove_video(db: AsyncSession, playlist_id: int, video_id: int) -> bool:
    res = await db.execute(
        delete(PlaylistVideo)
        .where(PlaylistVideo.playlist_id == playlist_id, PlaylistVideo.video_id == video_id)
        .execution_options(synchronize_session=False)
    )
    return bool(res.rowcount)


async def delete_playlist_cascade(db: AsyncSession, playlist_id: int) -> None:
    await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
    await db.execute(delete(Playlist).where(Playlist.id == playlist_id))
