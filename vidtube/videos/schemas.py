# vidtube/videos/schemas.py
from datetime import datetime
from typing import Literal

from vidtube.core.schemas import CamelModel, OwnerOut


class VideoOut(CamelModel):
    id: int
    title: str
    description: str
    video_file: str             # URL pública /media/videos/...
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    owner: OwnerOut

    likes_count: int = 0
    is_liked: bool = False
    # solo en la lectura de un video
    comments_count: int | None = None

    created_at: datetime
    updated_at: datetime | None = None


class PublishStatusOut(CamelModel):
    id: int
    is_published: bool


# campos por los que se puede ordenar el listado público
SORT_FIELDS = {"createdAt", "views", "duration", "title"}
SortType = Literal["asc", "desc"]
