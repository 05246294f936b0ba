# vidtube/comments/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.comments import service as svc
from vidtube.comments.schemas import CommentIn
from vidtube.core.deps import get_current_user
from vidtube.core.json import api_response
from vidtube.core.pagination import PageParams, page_params
from vidtube.db.session import get_session
from vidtube.users.models import User

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/video/{video_id}")
async def list_comments(
    video_id: int,
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.list_video_comments(db, video_id, params, user)
    return api_response(data, "Comments retrieved successfully")


@router.post("/video/{video_id}")
async def add_comment(
    video_id: int,
    payload: CommentIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    comment = await svc.add_comment(db, video_id, user, payload.content)
    return api_response(comment, "Comment created successfully", 201)


@router.patch("/{comment_id}")
async def update_comment(
    comment_id: int,
    payload: CommentIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    comment = await svc.update_comment(db, comment_id, user, payload.content)
    return api_response(comment, "Comment updated successfully")


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.delete_comment(db, comment_id, user)
    return api_response({}, "Comment deleted successfully")
