# vidtube/playlists/schemas.py
from datetime import datetime

from pydantic import Field, model_validator

from vidtube.core.schemas import CamelModel, OwnerOut
from vidtube.videos.schemas import VideoOut


class PlaylistCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field("", max_length=200)


class PlaylistUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = Field(None, max_length=200)

    @model_validator(mode="after")
    def _at_least_one(self):
        if self.name is None and self.description is None:
            raise ValueError("name or description is required")
        return self


class PlaylistOut(CamelModel):
    id: int
    name: str
    description: str
    owner: OwnerOut
    total_videos: int = 0
    videos: list[VideoOut] = []
    created_at: datetime
    updated_at: datetime | None = None
