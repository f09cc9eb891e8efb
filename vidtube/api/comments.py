from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.comment import CommentCreate, CommentWithOwner
from vidtube.schemas.common import ApiResponse, Page
from vidtube.services.comment_service import CommentService
from vidtube.utils.security import get_current_user
from vidtube.utils.validators import parse_uuid

comments_router = APIRouter()


@comments_router.get("/{video_id}", response_model=ApiResponse[Page[CommentWithOwner]])
async def list_video_comments(
    video_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comments = await CommentService(db).list_for_video(
        parse_uuid(video_id, "video id"), current_user.id, page, limit
    )
    return ApiResponse(data=comments, message="Comments fetched successfully")


@comments_router.post(
    "/{video_id}",
    response_model=ApiResponse[CommentWithOwner],
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    video_id: str,
    payload: CommentCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).add(parse_uuid(video_id, "video id"), current_user, payload.content)
    return ApiResponse(
        status=status.HTTP_201_CREATED,
        data=comment,
        message="Comment added successfully",
    )


@comments_router.patch("/{comment_id}", response_model=ApiResponse[CommentWithOwner])
async def update_comment(
    comment_id: str,
    payload: CommentCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).update(
        parse_uuid(comment_id, "comment id"), current_user, payload.content
    )
    return ApiResponse(data=comment, message="Comment updated successfully")


@comments_router.delete("/{comment_id}", response_model=ApiResponse[dict])
async def delete_comment(
    comment_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CommentService(db).delete(parse_uuid(comment_id, "comment id"), current_user)
    return ApiResponse(data={}, message="Comment deleted successfully")
