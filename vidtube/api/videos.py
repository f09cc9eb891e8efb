from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.clients.cloudinary_client import CloudinaryClient, get_media_store
from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.video import PublishStatus, VideoWithOwner
from vidtube.services.media_service import MediaService
from vidtube.services.video_service import VideoService
from vidtube.utils.security import get_current_user
from vidtube.utils.validators import parse_uuid

videos_router = APIRouter()


@videos_router.get("/user/{owner_id}", response_model=ApiResponse[Page[VideoWithOwner]])
async def list_user_videos(
    owner_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_type: str = Query("desc", alias="sortType"),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    videos = await VideoService(db).list_by_owner(
        owner_id=parse_uuid(owner_id, "user id"),
        viewer_id=current_user.id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_type=sort_type,
    )
    return ApiResponse(data=videos, message="Videos fetched successfully")


@videos_router.post(
    "",
    response_model=ApiResponse[VideoWithOwner],
    status_code=status.HTTP_201_CREATED,
)
async def publish_video(
    title: str = Form(...),
    description: str = Form(...),
    video_file: UploadFile = File(..., alias="videoFile"),
    thumbnail: UploadFile = File(...),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media_store: CloudinaryClient = Depends(get_media_store),
):
    video = await VideoService(db, MediaService(media_store)).publish(
        owner=current_user,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
    )
    return ApiResponse(
        status=status.HTTP_201_CREATED,
        data=video,
        message="Video uploaded successfully",
    )


@videos_router.get("/{video_id}", response_model=ApiResponse[VideoWithOwner])
async def get_video(
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await VideoService(db).get_for_viewer(parse_uuid(video_id, "video id"), current_user.id)
    return ApiResponse(data=video, message="Video fetched successfully")


@videos_router.patch("/{video_id}", response_model=ApiResponse[VideoWithOwner])
async def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media_store: CloudinaryClient = Depends(get_media_store),
):
    video = await VideoService(db, MediaService(media_store)).update(
        video_id=parse_uuid(video_id, "video id"),
        user=current_user,
        title=title,
        description=description,
        video_file=video_file,
        thumbnail=thumbnail,
    )
    return ApiResponse(data=video, message="Video updated successfully")


@videos_router.delete("/{video_id}", response_model=ApiResponse[dict])
async def delete_video(
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media_store: CloudinaryClient = Depends(get_media_store),
):
    await VideoService(db, MediaService(media_store)).delete(parse_uuid(video_id, "video id"), current_user)
    return ApiResponse(data={}, message="Video deleted successfully")


@videos_router.patch("/{video_id}/toggle-publish", response_model=ApiResponse[PublishStatus])
async def toggle_publish_status(
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await VideoService(db).toggle_publish(parse_uuid(video_id, "video id"), current_user)
    return ApiResponse(
        data=PublishStatus.model_validate(video),
        message="Publish status toggled successfully",
    )
