# vidtube/subscriptions/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.db.session import get_session
from vidtube.subscriptions import service as svc
from vidtube.users.models import User

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    status = await svc.toggle(db, channel_id, user)
    msg = "Subscribed successfully" if status.is_subscribed else "Unsubscribed successfully"
    return api_response(status, msg)


@router.get("/check-subscription/{channel_id}")
async def check_subscription(
    channel_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    status = await svc.status(db, channel_id, user)
    return api_response(status, "Subscription status fetched successfully")


@router.get("/channel/{channel_id}/subscribers")
async def channel_subscribers(
    channel_id: int,
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.channel_subscribers(db, channel_id, params)
    return api_response(data, "Subscribers fetched successfully")


@router.get("/user/subscribed")
async def subscribed_channels(
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.subscribed_channels(db, user, params)
    return api_response(data, "Subscribed channels fetched successfully")
