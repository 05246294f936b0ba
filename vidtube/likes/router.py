# vidtube/likes/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.db.session import get_session
from vidtube.likes import service as svc
from vidtube.users.models import User

router = APIRouter(prefix="/likes", tags=["likes"])


def _message(name: str, liked: bool) -> str:
    return f"{name} liked successfully" if liked else f"{name} unliked successfully"


@router.post("/videos/{video_id}")
async def toggle_video_like(
    video_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    status = await svc.toggle(db, "video", video_id, user)
    return api_response(status, _message("Video", status.is_liked))


@router.post("/comments/{comment_id}")
async def toggle_comment_like(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    status = await svc.toggle(db, "comment", comment_id, user)
    return api_response(status, _message("Comment", status.is_liked))


@router.post("/tweets/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    status = await svc.toggle(db, "tweet", tweet_id, user)
    return api_response(status, _message("Tweet", status.is_liked))


@router.get("/likedVideos")
async def liked_videos(
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.liked_videos(db, user, params)
    return api_response(data, "Liked videos retrieved successfully")
