# vidtube/tweets/service.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import NotFoundError
from vidtube.core.guards import assert_owner
from vidtube.core.pagination import PageParams, fetch_page, page_meta
from vidtube.engagement.service import hydrate_tweets
from vidtube.tweets import repository as repo
from vidtube.tweets.schemas import TweetOut
from vidtube.users.models import User
from vidtube.users.repository import get_by_id

log = logging.getLogger("vidtube.tweets")


async def create_tweet(db: AsyncSession, author: User, content: str) -> TweetOut:
    tweet = await repo.create_tweet(db, author.id, content)
    await db.commit()
    return (await hydrate_tweets(db, [tweet], viewer_id=author.id))[0]


async def list_tweets(
    db: AsyncSession, params: PageParams, viewer: User, owner_id: int | None = None
) -> dict:
    if owner_id is not None and not await get_by_id(db, owner_id):
        raise NotFoundError("User not found")

    tweets, total = await fetch_page(db, repo.tweets_query(owner_id), params)
    return {
        "tweets": await hydrate_tweets(db, tweets, viewer_id=viewer.id),
        **page_meta(total, params, "totalTweets"),
    }


async def update_tweet(db: AsyncSession, tweet_id: int, actor: User, content: str) -> TweetOut:
    tweet = await repo.get_tweet(db, tweet_id)
    assert_owner(tweet, actor.id, "Tweet")
    tweet.content = content
    await db.commit()
    await db.refresh(tweet)
    return (await hydrate_tweets(db, [tweet], viewer_id=actor.id))[0]


async def delete_tweet(db: AsyncSession, tweet_id: int, actor: User) -> None:
    tweet = await repo.get_tweet(db, tweet_id)
    assert_owner(tweet, actor.id, "Tweet")
    try:
        await repo.delete_tweet_cascade(db, tweet_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    log.info("tweet borrado id=%s", tweet_id)
