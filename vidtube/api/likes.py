from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.like import LikeStatus
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.like_service import LikeService
from vidtube.utils.security import get_current_user
from vidtube.utils.validators import parse_uuid

likes_router = APIRouter()


async def _toggle(subject: str, subject_id: str, user: Users, db: AsyncSession) -> ApiResponse:
    is_liked = await LikeService(db).toggle(subject, parse_uuid(subject_id, f"{subject} id"), user.id)
    return ApiResponse(
        data=LikeStatus(is_liked=is_liked),
        message=f"{subject.capitalize()} like toggled successfully",
    )


@likes_router.post("/video/{video_id}", response_model=ApiResponse[LikeStatus])
async def toggle_video_like(
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle("video", video_id, current_user, db)


@likes_router.post("/comment/{comment_id}", response_model=ApiResponse[LikeStatus])
async def toggle_comment_like(
    comment_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle("comment", comment_id, current_user, db)


@likes_router.post("/tweet/{tweet_id}", response_model=ApiResponse[LikeStatus])
async def toggle_tweet_like(
    tweet_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle("tweet", tweet_id, current_user, db)


@likes_router.get("/videos", response_model=ApiResponse[Page[VideoWithOwner]])
async def liked_videos(
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    videos = await LikeService(db).liked_videos(current_user.id, page, limit)
    return ApiResponse(data=videos, message="Liked videos fetched successfully")
