# vidtube/subscriptions/repository.py
from sqlalchemy import Select, delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.upsert import insert_ignore
from vidtube.subscriptions.models import Subscription
from vidtube.users.models import User


async def count_subscribers(db: AsyncSession, channel_id: int) -> int:
    res = await db.execute(
        select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
    )
    return int(res.scalar_one() or 0)


async def is_subscribed(db: AsyncSession, subscriber_id: int, channel_id: int) -> bool:
    res = await db.execute(
        select(Subscription.id).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
    )
    return res.first() is not None


async def toggle_subscription(db: AsyncSession, subscriber_id: int, channel_id: int) -> tuple[bool, int]:
    """
    Suscribe/desuscribe. Devuelve (subscribed, total_subscribers).
    Mismo esquema que los likes: DELETE condicional y, si no había fila,
    insert sobre el par único.
    """
    res = await db.execute(
        delete(Subscription)
        .where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
        .execution_options(synchronize_session=False)
    )
    if res.rowcount:
        subscribed = False
    else:
        await insert_ignore(
            db,
            Subscription,
            {"subscriber_id": subscriber_id, "channel_id": channel_id},
            index_elements=("subscriber_id", "channel_id"),
        )
        subscribed = True
    return subscribed, await count_subscribers(db, channel_id)


def subscribers_query(channel_id: int) -> Select:
    return (
        select(User, Subscription.created_at.label("subscribed_at"))
        .join(Subscription, Subscription.subscriber_id == User.id)
        .where(Subscription.channel_id == channel_id)
        .order_by(desc(Subscription.created_at), desc(Subscription.id))
    )


def subscribed_channels_query(subscriber_id: int) -> Select:
    return (
        select(User, Subscription.created_at.label("subscribed_at"))
        .join(Subscription, Subscription.channel_id == User.id)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(desc(Subscription.created_at), desc(Subscription.id))
    )
