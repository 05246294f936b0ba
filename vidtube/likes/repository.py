# vidtube/likes/repository.py
from sqlalchemy import Select, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.upsert import insert_ignore
from vidtube.likes.models import Like
from vidtube.videos.models import Video

# objetivo -> nombre de columna en likes
TARGET_FIELDS = {
    "video": "video_id",
    "comment": "comment_id",
    "tweet": "tweet_id",
}


async def count_likes(db: AsyncSession, target: str, target_id: int) -> int:
    col = getattr(Like, TARGET_FIELDS[target])
    res = await db.execute(select(func.count(Like.id)).where(col == target_id))
    return int(res.scalar_one() or 0)


async def toggle_like(db: AsyncSession, target: str, target_id: int, user_id: int) -> tuple[bool, int]:
    """
    Activa/desactiva el like de un usuario sobre un objetivo.
    Devuelve (liked, total_likes).

    DELETE condicional primero; si no borró nada, INSERT ... ON CONFLICT
    DO NOTHING sobre el par único. Dos toggles concurrentes no pueden dejar
    likes duplicados.
    """
    field = TARGET_FIELDS[target]
    col = getattr(Like, field)

    res = await db.execute(
        delete(Like)
        .where(col == target_id, Like.liked_by_id == user_id)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount:
        liked = False
    else:
        await insert_ignore(
            db,
            Like,
            {field: target_id, "liked_by_id": user_id},
            index_elements=("liked_by_id", field),
        )
        liked = True

    total = await count_likes(db, target, target_id)
    return liked, total


def liked_videos_query(user_id: int) -> Select:
    """Videos publicados que le gustan al usuario, último like primero."""
    return (
        select(Video)
        .join(Like, Like.video_id == Video.id)
        .where(Like.liked_by_id == user_id, Video.is_published.is_(True))
        .order_by(desc(Like.created_at), desc(Like.id))
    )
