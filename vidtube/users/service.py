# vidtube/users/service.py
from __future__ import annotations

import logging

from fastapi import UploadFile
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    bad_request_from,
)
from vidtube.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from vidtube.engagement.service import hydrate_videos, subscriber_counts, subscribed_by_viewer
from vidtube.media.storage import StoredMedia, discard_quietly, save_upload
from vidtube.subscriptions.models import Subscription
from vidtube.users import repository as repo
from vidtube.users.models import User
from vidtube.users.schemas import ChannelProfileOut, LoginIn, RegisterIn, UpdateDetailsIn
from vidtube.videos.schemas import VideoOut

log = logging.getLogger("vidtube.users")


def issue_tokens(user: User) -> tuple[str, str]:
    access = create_access_token(sub=str(user.id), username=user.username, email=user.email)
    refresh = create_refresh_token(sub=str(user.id))
    # solo el último refresh token emitido es válido
    user.refresh_token = refresh
    return access, refresh


async def register_user(
    db: AsyncSession,
    *,
    full_name: str,
    username: str,
    email: str,
    password: str,
    avatar: UploadFile | None = None,
    cover_image: UploadFile | None = None,
) -> User:
    try:
        data = RegisterIn(full_name=full_name, username=username, email=email, password=password)
    except ValidationError as e:
        raise bad_request_from(e)

    if await repo.get_by_username_or_email(db, data.username, data.email):
        raise ConflictError("User with email or username already exists")

    stored_avatar: StoredMedia | None = None
    stored_cover: StoredMedia | None = None
    try:
        if avatar is not None and avatar.filename:
            stored_avatar = save_upload(avatar, "avatar")
        if cover_image is not None and cover_image.filename:
            stored_cover = save_upload(cover_image, "cover")

        user = await repo.create_user(
            db,
            username=data.username,
            email=data.email,
            full_name=data.full_name,
            hashed_password=hash_password(data.password),
            avatar=stored_avatar.url if stored_avatar else None,
            cover_image=stored_cover.url if stored_cover else None,
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        discard_quietly(stored_avatar, stored_cover)
        raise ConflictError("User with email or username already exists")
    except Exception:
        await db.rollback()
        discard_quietly(stored_avatar, stored_cover)
        raise

    log.info("usuario registrado id=%s username=%s", user.id, user.username)
    return user


async def authenticate_user(db: AsyncSession, data: LoginIn) -> User:
    user = await repo.get_by_username_or_email(db, data.username, data.email)
    if not user:
        raise NotFoundError("User does not exist")
    if not verify_password(data.password, user.hashed_password):
        raise UnauthorizedError("Invalid user credentials")
    return user


async def login_user(db: AsyncSession, data: LoginIn) -> tuple[User, str, str]:
    user = await authenticate_user(db, data)
    access, refresh = issue_tokens(user)
    await db.commit()
    await db.refresh(user)
    log.info("login id=%s", user.id)
    return user, access, refresh


async def refresh_tokens(db: AsyncSession, token: str | None) -> tuple[User, str, str]:
    """Rota access + refresh. El refresh recibido debe ser el último emitido."""
    if not token:
        raise UnauthorizedError("Unauthorized request")
    try:
        user_id = int(decode_refresh_token(token))
    except (JWTError, ValueError):
        raise UnauthorizedError("Invalid refresh token")

    user = await repo.get_by_id(db, user_id)
    if not user:
        raise UnauthorizedError("Invalid refresh token")
    if user.refresh_token != token:
        raise UnauthorizedError("Refresh token is expired or used")

    access, refresh = issue_tokens(user)
    await db.commit()
    await db.refresh(user)
    return user, access, refresh


async def logout_user(db: AsyncSession, user: User, access_token: str) -> None:
    user.refresh_token = None
    await repo.blacklist_token(db, access_token)
    await db.commit()
    log.info("logout id=%s", user.id)


async def change_password(db: AsyncSession, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise BadRequestError("Invalid old password")
    user.hashed_password = hash_password(new_password)
    await db.commit()


async def update_details(db: AsyncSession, user: User, data: UpdateDetailsIn) -> User:
    username = data.username.lower()
    email = str(data.email).lower()

    if await repo.get_by_username_or_email(db, username, email, exclude_id=user.id):
        raise ConflictError("Username or email is already taken")

    user.full_name = data.full_name
    user.username = username
    user.email = email
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Username or email is already taken")
    await db.refresh(user)
    return user


async def update_image(db: AsyncSession, user: User, file: UploadFile | None, kind: str) -> User:
    """kind: 'avatar' | 'cover'. Sube la nueva imagen y borra la anterior."""
    if file is None or not file.filename:
        raise BadRequestError(f"{'Avatar' if kind == 'avatar' else 'Cover image'} file is missing")

    stored = save_upload(file, kind)
    field = "avatar" if kind == "avatar" else "cover_image"
    previous = getattr(user, field)
    try:
        setattr(user, field, stored.url)
        await db.commit()
    except Exception:
        await db.rollback()
        discard_quietly(stored)
        raise

    discard_quietly(previous)
    await db.refresh(user)
    return user


async def channel_profile(db: AsyncSession, username: str, viewer: User) -> ChannelProfileOut:
    channel = await repo.get_by_username(db, username.strip())
    if not channel:
        raise NotFoundError("Channel does not exist")

    subs = await subscriber_counts(db, [channel.id])
    mine = await subscribed_by_viewer(db, [channel.id], viewer.id)
    res = await db.execute(
        select(func.count(Subscription.id)).where(Subscription.subscriber_id == channel.id)
    )
    subscribed_to = int(res.scalar_one() or 0)

    return ChannelProfileOut(
        id=channel.id,
        username=channel.username,
        full_name=channel.full_name,
        avatar=channel.avatar,
        cover_image=channel.cover_image,
        email=channel.email if channel.id == viewer.id else None,
        subscribers_count=subs.get(channel.id, 0),
        channels_subscribed_to_count=subscribed_to,
        is_subscribed=channel.id in mine,
        created_at=channel.created_at,
    )


async def watch_history(db: AsyncSession, user: User) -> list[VideoOut]:
    videos = await repo.list_history(db, user.id)
    return await hydrate_videos(db, videos, viewer_id=user.id)
