# vidtube/comments/schemas.py
from datetime import datetime
from typing import Annotated

from pydantic import StringConstraints

from vidtube.core.schemas import CamelModel, OwnerOut


class CommentIn(CamelModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]


class CommentOut(CamelModel):
    id: int
    content: str
    video_id: int
    owner: OwnerOut
    likes_count: int = 0
    is_liked: bool = False
    created_at: datetime
    updated_at: datetime | None = None
