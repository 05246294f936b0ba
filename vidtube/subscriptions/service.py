# vidtube/subscriptions/service.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import BadRequestError, NotFoundError
from vidtube.core.pagination import PageParams, count_rows, page_meta
from vidtube.engagement.service import hydrate_channels, hydrate_videos
from vidtube.subscriptions import repository as repo
from vidtube.subscriptions.schemas import SubscribedChannelOut, SubscriberOut, SubscriptionStatus
from vidtube.users.models import User
from vidtube.users.repository import get_by_id
from vidtube.videos.repository import latest_video_by_owner


async def _channel_or_404(db: AsyncSession, channel_id: int) -> User:
    channel = await get_by_id(db, channel_id)
    if not channel:
        raise NotFoundError("Channel not found")
    return channel


async def toggle(db: AsyncSession, channel_id: int, actor: User) -> SubscriptionStatus:
    await _channel_or_404(db, channel_id)
    if channel_id == actor.id:
        raise BadRequestError("You cannot subscribe to your own channel")

    try:
        subscribed, total = await repo.toggle_subscription(db, actor.id, channel_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return SubscriptionStatus(channel_id=channel_id, is_subscribed=subscribed, subscribers_count=total)


async def status(db: AsyncSession, channel_id: int, actor: User) -> SubscriptionStatus:
    await _channel_or_404(db, channel_id)
    return SubscriptionStatus(
        channel_id=channel_id,
        is_subscribed=await repo.is_subscribed(db, actor.id, channel_id),
        subscribers_count=await repo.count_subscribers(db, channel_id),
    )


async def _page_rows(db: AsyncSession, stmt, params: PageParams) -> tuple[list, int]:
    total = await count_rows(db, stmt)
    res = await db.execute(stmt.limit(params.limit).offset(params.offset))
    return list(res.all()), total


async def channel_subscribers(db: AsyncSession, channel_id: int, params: PageParams) -> dict:
    await _channel_or_404(db, channel_id)
    rows, total = await _page_rows(db, repo.subscribers_query(channel_id), params)
    subscribers = [
        SubscriberOut(
            id=u.id,
            username=u.username,
            full_name=u.full_name,
            avatar=u.avatar,
            subscribed_at=since,
        )
        for u, since in rows
    ]
    return {"subscribers": subscribers, **page_meta(total, params, "totalSubscribers")}


async def subscribed_channels(db: AsyncSession, actor: User, params: PageParams) -> dict:
    """Canales a los que sigue el usuario, cada uno con su último video."""
    rows, total = await _page_rows(db, repo.subscribed_channels_query(actor.id), params)
    users = [u for u, _ in rows]

    channels = await hydrate_channels(db, users, viewer_id=actor.id)
    latest = await latest_video_by_owner(db, [u.id for u in users])
    latest_out = {
        v.owner.id: v for v in await hydrate_videos(db, list(latest.values()), viewer_id=actor.id)
    }

    out = [
        SubscribedChannelOut(
            **ch.model_dump(),
            subscribed_at=since,
            latest_video=latest_out.get(ch.id),
        )
        for ch, (_, since) in zip(channels, rows)
    ]
    return {"channels": out, **page_meta(total, params, "totalChannels")}
