# vidtube/playlists/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.db.session import get_session
from vidtube.playlists import service as svc
from vidtube.playlists.schemas import PlaylistCreate, PlaylistUpdate
from vidtube.users.models import User

router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.post("")
async def create_playlist(
    payload: PlaylistCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await svc.create_playlist(db, user, payload)
    return api_response(playlist, "Playlist created successfully", 201)


@router.get("/user/{user_id}")
async def user_playlists(
    user_id: int,
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.user_playlists(db, user_id, user, params)
    return api_response(data, "User playlists fetched successfully")


@router.get("/{playlist_id}")
async def get_playlist(
    playlist_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await svc.get_playlist(db, playlist_id, user)
    return api_response(playlist, "Playlist fetched successfully")


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: int,
    payload: PlaylistUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await svc.update_playlist(db, playlist_id, user, payload)
    return api_response(playlist, "Playlist updated successfully")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.delete_playlist(db, playlist_id, user)
    return api_response({}, "Playlist deleted successfully")


@router.post("/{playlist_id}/v/{video_id}")
async def add_video(
    playlist_id: int,
    video_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await svc.add_video(db, playlist_id, video_id, user)
    return api_response(playlist, "Video added to playlist successfully")


@router.delete("/{playlist_id}/v/{video_id}")
async def remove_video(
    playlist_id: int,
    video_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await svc.remove_video(db, playlist_id, video_id, user)
    return api_response(playlist, "Video removed from playlist successfully")
