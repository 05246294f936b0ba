# vidtube/main.py
import os
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from vidtube.core.config import settings
from vidtube.core.errors import register_error_handlers
from vidtube.core.json import UTF8JSONResponse, api_response
from vidtube.db.init_db import init_models

# routers
from vidtube.users.router import router as users_router
from vidtube.videos.router import router as videos_router
from vidtube.comments.router import router as comments_router
from vidtube.likes.router import router as likes_router
from vidtube.tweets.router import router as tweets_router
from vidtube.playlists.router import router as playlists_router
from vidtube.subscriptions.router import router as subscriptions_router
from vidtube.dashboard.router import router as dashboard_router
from vidtube.media.streaming import router as media_router

# Logging
_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
for _logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_logger_name).setLevel(_level)

log = logging.getLogger("vidtube")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("🚀 Iniciando servicio…")
    os.makedirs(settings.MEDIA_DIR, exist_ok=True)
    if settings.DB_AUTO_CREATE:
        await init_models()
    log.info("✅ Startup listo.")
    yield


app = FastAPI(
    title="VidTube API",
    default_response_class=UTF8JSONResponse,
    lifespan=lifespan,
)

# CORS (cookies de auth -> allow_credentials)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def ensure_json_charset(request: Request, call_next):
    response = await call_next(request)
    # si otra response quitó el charset, lo restauramos
    ct = response.headers.get("content-type", "")
    if ct.startswith("application/json") and "charset=" not in ct:
        response.headers["content-type"] = "application/json; charset=utf-8"
    return response


api = APIRouter(prefix="/api/v1")


@api.get("/healthcheck", tags=["health"])
async def healthcheck():
    return api_response({"status": "ok"}, "Service is healthy ✨")


api.include_router(users_router)          # /api/v1/users/...
api.include_router(videos_router)         # /api/v1/videos/...
api.include_router(comments_router)       # /api/v1/comments/...
api.include_router(likes_router)          # /api/v1/likes/...
api.include_router(tweets_router)         # /api/v1/tweets/...
api.include_router(playlists_router)      # /api/v1/playlists/...
api.include_router(subscriptions_router)  # /api/v1/subscriptions/...
api.include_router(dashboard_router)      # /api/v1/dashboard/...

app.include_router(api)
app.include_router(media_router)          # /media/...
