# vidtube/users/repository.py
from datetime import timedelta

from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import settings
from vidtube.db.base import utcnow
from vidtube.db.upsert import insert_ignore, upsert
from vidtube.users.models import BlacklistedToken, User, WatchHistory
from vidtube.videos.models import Video


async def get_by_username(db: AsyncSession, username: str) -> User | None:
    res = await db.execute(select(User).where(User.username == username.lower()))
    return res.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email.lower()))
    return res.scalar_one_or_none()


async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def get_by_username_or_email(
    db: AsyncSession,
    username: str | None,
    email: str | None,
    exclude_id: int | None = None,
) -> User | None:
    conds = []
    if username:
        conds.append(User.username == username.lower())
    if email:
        conds.append(User.email == email.lower())
    if not conds:
        return None
    stmt = select(User).where(or_(*conds))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    res = await db.execute(stmt.limit(1))
    return res.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    full_name: str,
    hashed_password: str,
    avatar: str | None = None,
    cover_image: str | None = None,
) -> User:
    user = User(
        username=username.lower(),
        email=email.lower(),
        full_name=full_name,
        hashed_password=hashed_password,
        avatar=avatar,
        cover_image=cover_image,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def search_users(db: AsyncSession, query: str, limit: int) -> list[User]:
    """Canales cuyo username o nombre contiene `query` (sin distinguir mayúsculas)."""
    needle = query.lower()
    res = await db.execute(
        select(User)
        .where(
            or_(
                func.lower(User.username).contains(needle, autoescape=True),
                func.lower(User.full_name).contains(needle, autoescape=True),
            )
        )
        .order_by(User.id)
        .limit(limit)
    )
    return list(res.scalars())


# -------------------------
# 📺 HISTORIAL
# -------------------------
async def add_to_history(db: AsyncSession, user_id: int, video_id: int) -> None:
    """Conjunto: si el video ya estaba no se duplica, solo sube al principio."""
    await upsert(
        db,
        WatchHistory,
        {"user_id": user_id, "video_id": video_id, "watched_at": utcnow()},
        index_elements=("user_id", "video_id"),
        update=("watched_at",),
    )


async def list_history(db: AsyncSession, user_id: int) -> list[Video]:
    res = await db.execute(
        select(Video)
        .join(WatchHistory, WatchHistory.video_id == Video.id)
        .where(WatchHistory.user_id == user_id)
        .order_by(desc(WatchHistory.watched_at), desc(WatchHistory.id))
    )
    return list(res.scalars())


# -------------------------
# 🚫 TOKENS REVOCADOS
# -------------------------
async def purge_expired_tokens(db: AsyncSession) -> None:
    await db.execute(delete(BlacklistedToken).where(BlacklistedToken.expires_at <= utcnow()))


async def blacklist_token(db: AsyncSession, token: str) -> None:
    await purge_expired_tokens(db)
    await insert_ignore(
        db,
        BlacklistedToken,
        {
            "token": token,
            "expires_at": utcnow() + timedelta(seconds=settings.TOKEN_BLACKLIST_SECONDS),
            "created_at": utcnow(),
        },
        index_elements=("token",),
    )


async def is_token_blacklisted(db: AsyncSession, token: str) -> bool:
    res = await db.execute(
        select(BlacklistedToken.id).where(
            BlacklistedToken.token == token,
            BlacklistedToken.expires_at > utcnow(),
        )
    )
    return res.first() is not None
