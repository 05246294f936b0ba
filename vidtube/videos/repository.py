# vidtube/videos/repository.py
from datetime import timedelta

from sqlalchemy import Select, asc, delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.comments.models import Comment
from vidtube.core.config import settings
from vidtube.db.base import utcnow
from vidtube.db.upsert import insert_ignore
from vidtube.likes.models import Like
from vidtube.playlists.models import PlaylistVideo
from vidtube.users.models import WatchHistory
from vidtube.videos.models import Video, VideoView

# campo público -> columna
SORT_COLUMNS = {
    "createdAt": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


async def create_video(
    db: AsyncSession,
    *,
    owner_id: int,
    title: str,
    description: str,
    video_file: str,
    thumbnail: str,
    duration: float,
) -> Video:
    video = Video(
        owner_id=owner_id,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
        duration=duration,
    )
    db.add(video)
    await db.flush()
    await db.refresh(video)
    return video


async def get_video(db: AsyncSession, video_id: int) -> Video | None:
    res = await db.execute(select(Video).where(Video.id == video_id))
    return res.scalar_one_or_none()


def videos_query(
    *,
    query: str | None = None,
    owner_id: int | None = None,
    only_published: bool = True,
    sort_by: str | None = None,
    sort_type: str | None = None,
) -> Select:
    """
    SELECT del listado de videos. Orden por defecto: más nuevos primero;
    sort_by/sort_type solo si vienen los dos. El id rompe empates.
    """
    stmt = select(Video)
    if only_published:
        stmt = stmt.where(Video.is_published.is_(True))
    if owner_id is not None:
        stmt = stmt.where(Video.owner_id == owner_id)
    if query:
        # % y _ del usuario son literales
        stmt = stmt.where(func.lower(Video.title).contains(query.lower(), autoescape=True))

    if sort_by and sort_type and sort_by in SORT_COLUMNS:
        direction = desc if sort_type == "desc" else asc
        return stmt.order_by(direction(SORT_COLUMNS[sort_by]), direction(Video.id))
    return stmt.order_by(desc(Video.created_at), desc(Video.id))


async def latest_video_by_owner(db: AsyncSession, owner_ids: list[int]) -> dict[int, Video]:
    """Último video publicado de cada canal."""
    if not owner_ids:
        return {}
    ranked = (
        select(
            Video.id,
            func.row_number()
            .over(partition_by=Video.owner_id, order_by=(desc(Video.created_at), desc(Video.id)))
            .label("rn"),
        )
        .where(Video.owner_id.in_(owner_ids), Video.is_published.is_(True))
        .subquery()
    )
    res = await db.execute(
        select(Video).join(ranked, ranked.c.id == Video.id).where(ranked.c.rn == 1)
    )
    return {v.owner_id: v for v in res.scalars()}


# -------------------------
# 👁️ VISTAS
# -------------------------
async def purge_expired_views(db: AsyncSession) -> None:
    cutoff = utcnow() - timedelta(seconds=settings.VIEW_DEDUP_SECONDS)
    await db.execute(delete(VideoView).where(VideoView.viewed_at < cutoff))


async def insert_view(db: AsyncSession, video_id: int, viewer_key: str) -> bool:
    """True si la marca es nueva; False si ya había una viva para el par."""
    inserted = await insert_ignore(
        db,
        VideoView,
        {"video_id": video_id, "viewer_key": viewer_key, "viewed_at": utcnow()},
        index_elements=("video_id", "viewer_key"),
    )
    return inserted is not None


async def increment_views(db: AsyncSession, video_id: int) -> None:
    # incremento atómico en la base, sin leer-modificar-escribir
    await db.execute(
        update(Video).where(Video.id == video_id).values(views=Video.views + 1)
    )


# -------------------------
# 🧹 BORRADO EN CASCADA
# -------------------------
async def delete_video_cascade(db: AsyncSession, video_id: int) -> None:
    """
    Borra primero los dependientes y al final el video. El commit lo hace
    quien llama, así todo queda en una sola transacción.
    """
    comment_ids = select(Comment.id).where(Comment.video_id == video_id)
    await db.execute(delete(Like).where(Like.comment_id.in_(comment_ids)))
    await db.execute(delete(Comment).where(Comment.video_id == video_id))
    await db.execute(delete(Like).where(Like.video_id == video_id))
    await db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id == video_id))
    await db.execute(delete(WatchHistory).where(WatchHistory.video_id == video_id))
    await db.execute(delete(VideoView).where(VideoView.video_id == video_id))
    await db.execute(delete(Video).where(Video.id == video_id))
