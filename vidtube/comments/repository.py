# vidtube/comments/repository.py
from sqlalchemy import Select, delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.comments.models import Comment
from vidtube.likes.models import Like


async def create_comment(db: AsyncSession, video_id: int, owner_id: int, content: str) -> Comment:
    comment = Comment(video_id=video_id, owner_id=owner_id, content=content)
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return comment


async def get_comment(db: AsyncSession, comment_id: int) -> Comment | None:
    res = await db.execute(select(Comment).where(Comment.id == comment_id))
    return res.scalar_one_or_none()


def comments_for_video_query(video_id: int) -> Select:
    """Comentarios de un video, más nuevos primero."""
    return (
        select(Comment)
        .where(Comment.video_id == video_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
    )


async def delete_comment_cascade(db: AsyncSession, comment_id: int) -> None:
    # likes primero, luego el comentario; el commit lo hace quien llama
    await db.execute(delete(Like).where(Like.comment_id == comment_id))
    await db.execute(delete(Comment).where(Comment.id == comment_id))
