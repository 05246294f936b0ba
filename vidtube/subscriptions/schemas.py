# vidtube/subscriptions/schemas.py
from datetime import datetime

from vidtube.core.schemas import CamelModel
from vidtube.videos.schemas import VideoOut


class SubscriptionStatus(CamelModel):
    channel_id: int
    is_subscribed: bool
    subscribers_count: int


class ChannelOut(CamelModel):
    id: int
    username: str
    full_name: str
    avatar: str | None = None
    subscribers_count: int = 0
    is_subscribed: bool = False


class SubscriberOut(CamelModel):
    id: int
    username: str
    full_name: str
    avatar: str | None = None
    subscribed_at: datetime


class SubscribedChannelOut(ChannelOut):
    subscribed_at: datetime
    latest_video: VideoOut | None = None
