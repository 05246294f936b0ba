# vidtube/engagement/service.py
"""
Agregador de engagement: likes, comentarios, suscriptores y el snippet del
dueño se calculan al leer, nunca se guardan como contadores.

Cada función trabaja sobre una página completa de entidades: una consulta
agrupada por relación, no una por fila.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.comments.models import Comment
from vidtube.comments.schemas import CommentOut
from vidtube.core.schemas import OwnerOut
from vidtube.likes.models import Like
from vidtube.subscriptions.models import Subscription
from vidtube.subscriptions.schemas import ChannelOut
from vidtube.tweets.models import Tweet
from vidtube.tweets.schemas import TweetOut
from vidtube.users.models import User
from vidtube.videos.models import Video
from vidtube.videos.schemas import VideoOut

# objetivo del like -> columna en la tabla likes
LIKE_TARGETS = {
    "video": Like.video_id,
    "comment": Like.comment_id,
    "tweet": Like.tweet_id,
}


def _ids(items: Iterable) -> list[int]:
    return list(dict.fromkeys(i.id for i in items))


async def like_counts(db: AsyncSession, target: str, ids: Sequence[int]) -> dict[int, int]:
    if not ids:
        return {}
    col = LIKE_TARGETS[target]
    res = await db.execute(
        select(col, func.count(Like.id)).where(col.in_(ids)).group_by(col)
    )
    return {row[0]: int(row[1]) for row in res.all()}


async def liked_by_viewer(
    db: AsyncSession, target: str, ids: Sequence[int], viewer_id: int | None
) -> set[int]:
    if not viewer_id or not ids:
        return set()
    col = LIKE_TARGETS[target]
    res = await db.execute(
        select(col).where(col.in_(ids), Like.liked_by_id == viewer_id)
    )
    return {row[0] for row in res.all()}


async def comment_counts(db: AsyncSession, video_ids: Sequence[int]) -> dict[int, int]:
    if not video_ids:
        return {}
    res = await db.execute(
        select(Comment.video_id, func.count(Comment.id))
        .where(Comment.video_id.in_(video_ids))
        .group_by(Comment.video_id)
    )
    return {row[0]: int(row[1]) for row in res.all()}


async def subscriber_counts(db: AsyncSession, channel_ids: Sequence[int]) -> dict[int, int]:
    if not channel_ids:
        return {}
    res = await db.execute(
        select(Subscription.channel_id, func.count(Subscription.id))
        .where(Subscription.channel_id.in_(channel_ids))
        .group_by(Subscription.channel_id)
    )
    return {row[0]: int(row[1]) for row in res.all()}


async def subscribed_by_viewer(
    db: AsyncSession, channel_ids: Sequence[int], viewer_id: int | None
) -> set[int]:
    if not viewer_id or not channel_ids:
        return set()
    res = await db.execute(
        select(Subscription.channel_id).where(
            Subscription.channel_id.in_(channel_ids),
            Subscription.subscriber_id == viewer_id,
        )
    )
    return {row[0] for row in res.all()}


def owner_snippet(user: User, viewer_id: int | None = None) -> OwnerOut:
    """Datos públicos del dueño; el email solo si el dueño es quien mira."""
    return OwnerOut(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        avatar=user.avatar,
        email=user.email if viewer_id is not None and user.id == viewer_id else None,
    )


async def owner_snippets(
    db: AsyncSession, owner_ids: Iterable[int], viewer_id: int | None
) -> dict[int, OwnerOut]:
    ids = list(dict.fromkeys(owner_ids))
    if not ids:
        return {}
    res = await db.execute(select(User).where(User.id.in_(ids)))
    return {u.id: owner_snippet(u, viewer_id) for u in res.scalars()}


# -------------------------
# 🎬 VIDEOS
# -------------------------
async def hydrate_videos(
    db: AsyncSession,
    videos: Sequence[Video],
    *,
    viewer_id: int | None = None,
    with_comments: bool = False,
) -> list[VideoOut]:
    ids = _ids(videos)
    owners = await owner_snippets(db, (v.owner_id for v in videos), viewer_id)
    likes = await like_counts(db, "video", ids)
    liked = await liked_by_viewer(db, "video", ids, viewer_id)
    comments = await comment_counts(db, ids) if with_comments else {}

    return [
        VideoOut(
            id=v.id,
            title=v.title,
            description=v.description,
            video_file=v.video_file,
            thumbnail=v.thumbnail,
            duration=v.duration,
            views=v.views,
            is_published=v.is_published,
            owner=owners[v.owner_id],
            likes_count=likes.get(v.id, 0),
            is_liked=v.id in liked,
            comments_count=comments.get(v.id, 0) if with_comments else None,
            created_at=v.created_at,
            updated_at=v.updated_at,
        )
        for v in videos
    ]


async def hydrate_video(
    db: AsyncSession, video: Video, *, viewer_id: int | None = None, with_comments: bool = True
) -> VideoOut:
    return (await hydrate_videos(db, [video], viewer_id=viewer_id, with_comments=with_comments))[0]


# -------------------------
# 💬 COMENTARIOS
# -------------------------
async def hydrate_comments(
    db: AsyncSession, comments: Sequence[Comment], *, viewer_id: int | None = None
) -> list[CommentOut]:
    ids = _ids(comments)
    owners = await owner_snippets(db, (c.owner_id for c in comments), viewer_id)
    likes = await like_counts(db, "comment", ids)
    liked = await liked_by_viewer(db, "comment", ids, viewer_id)
    return [
        CommentOut(
            id=c.id,
            content=c.content,
            video_id=c.video_id,
            owner=owners[c.owner_id],
            likes_count=likes.get(c.id, 0),
            is_liked=c.id in liked,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )
        for c in comments
    ]


# -------------------------
# 🐦 TWEETS
# -------------------------
async def hydrate_tweets(
    db: AsyncSession, tweets: Sequence[Tweet], *, viewer_id: int | None = None
) -> list[TweetOut]:
    ids = _ids(tweets)
    owners = await owner_snippets(db, (t.owner_id for t in tweets), viewer_id)
    likes = await like_counts(db, "tweet", ids)
    liked = await liked_by_viewer(db, "tweet", ids, viewer_id)
    return [
        TweetOut(
            id=t.id,
            content=t.content,
            owner=owners[t.owner_id],
            likes_count=likes.get(t.id, 0),
            is_liked=t.id in liked,
            created_at=t.created_at,
            updated_at=t.updated_at,
        )
        for t in tweets
    ]


# -------------------------
# 📡 CANALES
# -------------------------
async def hydrate_channels(
    db: AsyncSession, users: Sequence[User], *, viewer_id: int | None = None
) -> list[ChannelOut]:
    ids = _ids(users)
    subs = await subscriber_counts(db, ids)
    mine = await subscribed_by_viewer(db, ids, viewer_id)
    return [
        ChannelOut(
            id=u.id,
            username=u.username,
            full_name=u.full_name,
            avatar=u.avatar,
            subscribers_count=subs.get(u.id, 0),
            is_subscribed=u.id in mine,
        )
        for u in users
    ]
