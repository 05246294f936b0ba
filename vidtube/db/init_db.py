# vidtube/db/init_db.py
import logging
from vidtube.db.session import engine
from vidtube.db.base import Base

# 👇 importa todos los modelos que deben existir en la DB
from vidtube.users.models import User, WatchHistory, BlacklistedToken  # noqa: F401
from vidtube.videos.models import Video, VideoView  # noqa: F401
from vidtube.comments.models import Comment  # noqa: F401
from vidtube.likes.models import Like  # noqa: F401
from vidtube.tweets.models import Tweet  # noqa: F401
from vidtube.playlists.models import Playlist, PlaylistVideo  # noqa: F401
from vidtube.subscriptions.models import Subscription  # noqa: F401

log = logging.getLogger("vidtube.db")


async def init_models():
    """
    Crea/verifica todas las tablas declaradas en Base.metadata.
    Si la DB no responde el arranque falla: sin tablas la API no sirve.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("✅ DB init: tablas creadas/verificadas.")
