# vidtube/videos/router.py
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user, get_optional_user, viewer_key
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.db.session import get_session
from vidtube.users.models import User
from vidtube.videos import service as svc
from vidtube.videos.schemas import PublishStatusOut, SortType

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("")
async def list_videos(
    params: PageParams = Depends(page_params),
    query: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_type: SortType | None = Query(None, alias="sortType"),
    user_id: int | None = Query(None, alias="userId"),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    """
    Videos publicados (búsqueda por título, orden y paginación).
    Con `query` también devuelve canales que coinciden.
    """
    data = await svc.list_videos(
        db,
        params,
        viewer_id=viewer.id if viewer else None,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
    )
    return api_response(data, "Videos and channels retrieved successfully")


@router.post("/publish")
async def publish_video(
    title: str = Form(...),
    description: str = Form(""),
    video_file: UploadFile | None = File(None, alias="videoFile"),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    video = await svc.publish_video(
        db,
        user,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
    )
    return api_response(video, "Video uploaded successfully", 201)


@router.get("/{video_id}")
async def get_video(
    video_id: int,
    request: Request,
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    video = await svc.get_video_for_viewer(
        db,
        video_id,
        viewer_key=viewer_key(request, viewer),
        viewer_id=viewer.id if viewer else None,
    )
    return api_response(video, "Video retrieved successfully")


@router.patch("/update/{video_id}")
async def update_video(
    video_id: int,
    title: str | None = Form(None),
    description: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    video = await svc.update_video(
        db, video_id, user, title=title, description=description, thumbnail=thumbnail
    )
    return api_response(video, "Video updated successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.delete_video(db, video_id, user)
    return api_response({}, "Video and associated data deleted successfully")


@router.patch("/toggle/publish/{video_id}")
async def toggle_publish(
    video_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    video = await svc.toggle_publish(db, video_id, user)
    return api_response(
        PublishStatusOut(id=video.id, is_published=video.is_published),
        "Video status updated successfully",
    )
