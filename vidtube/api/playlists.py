from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.playlist import PlaylistCreate, PlaylistDetail, PlaylistSummary, PlaylistUpdate
from vidtube.services.playlist_service import PlaylistService
from vidtube.utils.security import get_current_user
from vidtube.utils.validators import parse_uuid

playlists_router = APIRouter()


@playlists_router.post("", response_model=ApiResponse[PlaylistDetail], status_code=status.HTTP_201_CREATED)
async def create_playlist(
    payload: PlaylistCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).create(current_user, payload.name, payload.description)
    return ApiResponse(status=status.HTTP_201_CREATED, data=playlist, message="Playlist created successfully")


@playlists_router.get("/user/{user_id}", response_model=ApiResponse[Page[PlaylistSummary]])
async def list_user_playlists(
    user_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlists = await PlaylistService(db).list_by_owner(
        parse_uuid(user_id, "user id"), current_user.id, page, limit
    )
    return ApiResponse(data=playlists, message="Playlists fetched successfully")


@playlists_router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetail])
async def get_playlist(
    playlist_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).get(parse_uuid(playlist_id, "playlist id"), current_user.id)
    return ApiResponse(data=playlist, message="Playlist fetched successfully")


@playlists_router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistDetail])
async def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).update(
        parse_uuid(playlist_id, "playlist id"),
        current_user,
        name=payload.name,
        description=payload.description,
    )
    return ApiResponse(data=playlist, message="Playlist updated successfully")


@playlists_router.delete("/{playlist_id}", response_model=ApiResponse[dict])
async def delete_playlist(
    playlist_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await PlaylistService(db).delete(parse_uuid(playlist_id, "playlist id"), current_user)
    return ApiResponse(data={}, message="Playlist deleted successfully")


@playlists_router.patch("/{playlist_id}/videos/{video_id}", response_model=ApiResponse[PlaylistDetail])
async def add_video_to_playlist(
    playlist_id: str,
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).add_video(
        parse_uuid(playlist_id, "playlist id"), parse_uuid(video_id, "video id"), current_user
    )
    return ApiResponse(data=playlist, message="Video added to playlist")


@playlists_router.delete("/{playlist_id}/videos/{video_id}", response_model=ApiResponse[PlaylistDetail])
async def remove_video_from_playlist(
    playlist_id: str,
    video_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).remove_video(
        parse_uuid(playlist_id, "playlist id"), parse_uuid(video_id, "video id"), current_user
    )
    return ApiResponse(data=playlist, message="Video removed from playlist")
