# vidtube/dashboard/service.py
"""Estadísticas del canal del usuario autenticado."""
from __future__ import annotations

from collections import OrderedDict
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import BadRequestError
from vidtube.core.pagination import PageParams, fetch_page, page_meta
from vidtube.db.base import utcnow
from vidtube.engagement.service import hydrate_videos
from vidtube.likes.models import Like
from vidtube.subscriptions.models import Subscription
from vidtube.users.models import User
from vidtube.videos.models import Video
from vidtube.videos.repository import videos_query
from vidtube.videos.schemas import SORT_FIELDS

PERFORMANCE_DAYS = 30


async def channel_stats(db: AsyncSession, user: User) -> dict:
    res = await db.execute(
        select(
            func.count(Video.id),
            func.coalesce(func.sum(Video.views), 0),
            func.coalesce(func.sum(Video.duration), 0.0),
        ).where(Video.owner_id == user.id)
    )
    total_videos, total_views, total_duration = res.one()

    res = await db.execute(
        select(func.count(Subscription.id)).where(Subscription.channel_id == user.id)
    )
    total_subscribers = int(res.scalar_one() or 0)

    res = await db.execute(
        select(func.count(Like.id))
        .join(Video, Like.video_id == Video.id)
        .where(Video.owner_id == user.id)
    )
    total_likes = int(res.scalar_one() or 0)

    # vistas de los videos subidos en los últimos 30 días, por día de subida
    since = utcnow() - timedelta(days=PERFORMANCE_DAYS)
    res = await db.execute(
        select(Video.created_at, Video.views)
        .where(Video.owner_id == user.id, Video.created_at >= since)
        .order_by(Video.created_at)
    )
    per_day: "OrderedDict[str, int]" = OrderedDict()
    for created_at, views in res.all():
        day = created_at.strftime("%Y-%m-%d")
        per_day[day] = per_day.get(day, 0) + int(views)

    return {
        "channelStats": {
            "totalVideos": int(total_videos or 0),
            "totalViews": int(total_views or 0),
            "totalSubscribers": total_subscribers,
            "totalLikes": total_likes,
            "totalDuration": float(total_duration or 0.0),
        },
        "last30DaysPerformance": [{"date": d, "views": v} for d, v in per_day.items()],
    }


async def channel_videos(
    db: AsyncSession,
    user: User,
    params: PageParams,
    *,
    query: str | None = None,
    sort_by: str = "createdAt",
    sort_type: str = "desc",
) -> dict:
    """Videos propios, publicados o no."""
    if sort_by not in SORT_FIELDS:
        raise BadRequestError(f"sortBy must be one of {sorted(SORT_FIELDS)}")
    stmt = videos_query(
        query=(query or "").strip() or None,
        owner_id=user.id,
        only_published=False,
        sort_by=sort_by,
        sort_type=sort_type,
    )
    videos, total = await fetch_page(db, stmt, params)
    return {
        "videos": await hydrate_videos(db, videos, viewer_id=user.id, with_comments=True),
        **page_meta(total, params, "totalVideos"),
    }
