# vidtube/users/router.py
from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import settings
from vidtube.core.deps import get_access_token, get_current_user
from vidtube.core.json import UTF8JSONResponse, api_response
from vidtube.db.session import get_session
from vidtube.users import service as svc
from vidtube.users.models import User
from vidtube.users.schemas import (
    AuthOut,
    ChangePasswordIn,
    LoginIn,
    RefreshIn,
    TokenPair,
    UpdateDetailsIn,
    UserOut,
)

router = APIRouter(prefix="/users", tags=["users"])


def _set_auth_cookies(response: UTF8JSONResponse, access: str, refresh: str) -> UTF8JSONResponse:
    opts = {"httponly": True, "secure": settings.COOKIE_SECURE, "samesite": "lax"}
    response.set_cookie("accessToken", access, max_age=settings.ACCESS_TOKEN_EXPIRE_MIN * 60, **opts)
    response.set_cookie("refreshToken", refresh, max_age=settings.REFRESH_TOKEN_EXPIRE_MIN * 60, **opts)
    return response


def _clear_auth_cookies(response: UTF8JSONResponse) -> UTF8JSONResponse:
    response.delete_cookie("accessToken")
    response.delete_cookie("refreshToken")
    return response


@router.post("/register")
async def register(
    full_name: str = Form(..., alias="fullName"),
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    db: AsyncSession = Depends(get_session),
):
    """
    multipart/form-data con fullName, username, email, password
    y opcionalmente avatar / coverImage.
    """
    user = await svc.register_user(
        db,
        full_name=full_name,
        username=username,
        email=email,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )
    return api_response(UserOut.model_validate(user), "User registered successfully", 201)


@router.post("/login")
async def login(payload: LoginIn, db: AsyncSession = Depends(get_session)):
    user, access, refresh = await svc.login_user(db, payload)
    out = AuthOut(user=UserOut.model_validate(user), access_token=access, refresh_token=refresh)
    return _set_auth_cookies(api_response(out, "User logged in successfully"), access, refresh)


@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    payload: RefreshIn | None = Body(None),
    db: AsyncSession = Depends(get_session),
):
    # cookie primero, luego el body
    incoming = request.cookies.get("refreshToken") or (payload.refresh_token if payload else None)
    _, access, refresh = await svc.refresh_tokens(db, incoming)
    out = TokenPair(access_token=access, refresh_token=refresh)
    return _set_auth_cookies(api_response(out, "Access token refreshed"), access, refresh)


@router.post("/logout")
async def logout(
    token: str = Depends(get_access_token),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.logout_user(db, user, token)
    return _clear_auth_cookies(api_response({}, "User logged out successfully"))


@router.get("/profile")
async def profile(user: User = Depends(get_current_user)):
    return api_response(UserOut.model_validate(user), "User retrieved successfully")


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.change_password(db, user, payload.current_password, payload.new_password)
    return api_response({}, "Password changed successfully")


@router.put("/update-details")
async def update_details(
    payload: UpdateDetailsIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user = await svc.update_details(db, user, payload)
    return api_response(UserOut.model_validate(user), "Account details updated successfully")


@router.patch("/update-avatar")
async def update_avatar(
    avatar: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user = await svc.update_image(db, user, avatar, "avatar")
    return api_response(UserOut.model_validate(user), "Avatar updated successfully")


@router.patch("/update-coverimage")
async def update_cover_image(
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    user = await svc.update_image(db, user, cover_image, "cover")
    return api_response(UserOut.model_validate(user), "Cover image updated successfully")


@router.get("/channel/{username}")
async def channel_profile(
    username: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    channel = await svc.channel_profile(db, username, user)
    return api_response(channel, "Channel profile fetched successfully")


@router.get("/history")
async def history(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    videos = await svc.watch_history(db, user)
    return api_response(videos, "Watch history fetched successfully")
