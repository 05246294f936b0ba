# vidtube/tweets/schemas.py
from datetime import datetime
from typing import Annotated

from pydantic import StringConstraints

from vidtube.core.schemas import CamelModel, OwnerOut


class TweetIn(CamelModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]


class TweetOut(CamelModel):
    id: int
    content: str
    owner: OwnerOut
    likes_count: int = 0
    is_liked: bool = False
    created_at: datetime
    updated_at: datetime | None = None
