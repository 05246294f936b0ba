# vidtube/tweets/repository.py
from sqlalchemy import Select, delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.likes.models import Like
from vidtube.tweets.models import Tweet


async def create_tweet(db: AsyncSession, owner_id: int, content: str) -> Tweet:
    tweet = Tweet(owner_id=owner_id, content=content)
    db.add(tweet)
    await db.flush()
    await db.refresh(tweet)
    return tweet


async def get_tweet(db: AsyncSession, tweet_id: int) -> Tweet | None:
    res = await db.execute(select(Tweet).where(Tweet.id == tweet_id))
    return res.scalar_one_or_none()


def tweets_query(owner_id: int | None = None) -> Select:
    stmt = select(Tweet)
    if owner_id is not None:
        stmt = stmt.where(Tweet.owner_id == owner_id)
    return stmt.order_by(desc(Tweet.created_at), desc(Tweet.id))


async def delete_tweet_cascade(db: AsyncSession, tweet_id: int) -> None:
    await db.execute(delete(Like).where(Like.tweet_id == tweet_id))
    await db.execute(delete(Tweet).where(Tweet.id == tweet_id))
