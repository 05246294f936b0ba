# vidtube/likes/schemas.py
from vidtube.core.schemas import CamelModel


class LikeStatus(CamelModel):
    """Estado tras el toggle; el conteo sale de un COUNT nuevo."""
    target_id: int
    likes_count: int
    is_liked: bool
