# vidtube/comments/service.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.comments import repository as repo
from vidtube.comments.schemas import CommentOut
from vidtube.core.errors import NotFoundError
from vidtube.core.guards import assert_owner
from vidtube.core.pagination import PageParams, fetch_page, page_meta
from vidtube.engagement.service import hydrate_comments
from vidtube.users.models import User
from vidtube.videos.repository import get_video

log = logging.getLogger("vidtube.comments")


async def list_video_comments(db: AsyncSession, video_id: int, params: PageParams, viewer: User) -> dict:
    if not await get_video(db, video_id):
        raise NotFoundError("Video not found")

    comments, total = await fetch_page(db, repo.comments_for_video_query(video_id), params)
    return {
        "comments": await hydrate_comments(db, comments, viewer_id=viewer.id),
        **page_meta(total, params, "totalComments"),
    }


async def add_comment(db: AsyncSession, video_id: int, author: User, content: str) -> CommentOut:
    if not await get_video(db, video_id):
        raise NotFoundError("Video not found")

    comment = await repo.create_comment(db, video_id, author.id, content.strip())
    await db.commit()
    return (await hydrate_comments(db, [comment], viewer_id=author.id))[0]


async def update_comment(db: AsyncSession, comment_id: int, actor: User, content: str) -> CommentOut:
    comment = await repo.get_comment(db, comment_id)
    assert_owner(comment, actor.id, "Comment")

    comment.content = content.strip()
    await db.commit()
    await db.refresh(comment)
    return (await hydrate_comments(db, [comment], viewer_id=actor.id))[0]


async def delete_comment(db: AsyncSession, comment_id: int, actor: User) -> None:
    comment = await repo.get_comment(db, comment_id)
    assert_owner(comment, actor.id, "Comment")

    try:
        await repo.delete_comment_cascade(db, comment_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    log.info("comentario borrado id=%s", comment_id)
