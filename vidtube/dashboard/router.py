# vidtube/dashboard/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.dashboard import service as svc
from vidtube.db.session import get_session
from vidtube.users.models import User
from vidtube.videos.schemas import SortType

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
async def stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.channel_stats(db, user)
    return api_response(data, "Channel stats fetched successfully")


@router.get("/videos")
async def videos(
    params: PageParams = Depends(page_params),
    query: str | None = Query(None),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_type: SortType = Query("desc", alias="sortType"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.channel_videos(
        db, user, params, query=query, sort_by=sort_by, sort_type=sort_type
    )
    return api_response(data, "Channel videos fetched successfully")
