# vidtube/tweets/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.db.session import get_session
from vidtube.tweets import service as svc
from vidtube.tweets.schemas import TweetIn
from vidtube.users.models import User

router = APIRouter(prefix="/tweets", tags=["tweets"])


@router.post("/create")
async def create_tweet(
    payload: TweetIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    tweet = await svc.create_tweet(db, user, payload.content)
    return api_response(tweet, "Tweet created successfully", 201)


@router.get("")
async def all_tweets(
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.list_tweets(db, params, user)
    return api_response(data, "Tweets fetched successfully")


@router.get("/user/{user_id}")
async def user_tweets(
    user_id: int,
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.list_tweets(db, params, user, owner_id=user_id)
    return api_response(data, "User tweets fetched successfully")


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: int,
    payload: TweetIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    tweet = await svc.update_tweet(db, tweet_id, user, payload.content)
    return api_response(tweet, "Tweet updated successfully")


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.delete_tweet(db, tweet_id, user)
    return api_response({}, "Tweet and associated data deleted successfully")
