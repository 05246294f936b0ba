# vidtube/likes/service.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.comments.repository import get_comment
from vidtube.core.errors import NotFoundError
from vidtube.core.pagination import PageParams, fetch_page, page_meta
from vidtube.engagement.service import hydrate_videos
from vidtube.likes import repository as repo
from vidtube.likes.schemas import LikeStatus
from vidtube.tweets.repository import get_tweet
from vidtube.users.models import User
from vidtube.videos.repository import get_video

_LOOKUPS = {
    "video": (get_video, "Video"),
    "comment": (get_comment, "Comment"),
    "tweet": (get_tweet, "Tweet"),
}


async def toggle(db: AsyncSession, target: str, target_id: int, actor: User) -> LikeStatus:
    lookup, name = _LOOKUPS[target]
    if not await lookup(db, target_id):
        raise NotFoundError(f"{name} not found")

    try:
        liked, total = await repo.toggle_like(db, target, target_id, actor.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return LikeStatus(target_id=target_id, likes_count=total, is_liked=liked)


async def liked_videos(db: AsyncSession, viewer: User, params: PageParams) -> dict:
    videos, total = await fetch_page(db, repo.liked_videos_query(viewer.id), params)
    return {
        "videos": await hydrate_videos(db, videos, viewer_id=viewer.id),
        **page_meta(total, params, "totalVideos"),
    }
