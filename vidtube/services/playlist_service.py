from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import NotFound
from vidtube.db.database import insert_ignore
from vidtube.models.playlists import Playlist, PlaylistVideo
from vidtube.models.users import Users
from vidtube.models.videos import Video
from vidtube.schemas.common import OwnerSummary, Page
from vidtube.schemas.playlist import PlaylistDetail, PlaylistSummary
from vidtube.services.lookups import ensure_owner, get_or_404, get_visible_video, visible_to
from vidtube.services.pagination import paginate, to_page
from vidtube.services.video_service import video_with_channel
from vidtube.utils.validators import optional_text, require_text


def playlist_summary(row) -> PlaylistSummary:
    playlist, total_videos = row
    summary = PlaylistSummary.model_validate(playlist)
    summary.total_videos = total_videos or 0
    return summary


class PlaylistService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: Users, name: str, description: Optional[str]) -> PlaylistDetail:
        playlist = Playlist(
            name=require_text(name, "name"),
            description=(description or "").strip(),
            owner_id=user.id,
        )
        self.db.add(playlist)
        await self.db.commit()
        await self.db.refresh(playlist)

        logger.info(f"User {user.id} created playlist {playlist.id}")
        return await self.get(playlist.id, user.id)

    async def get(self, playlist_id: UUID, viewer_id: UUID) -> PlaylistDetail:
        playlist = await get_or_404(self.db, Playlist, playlist_id, "Playlist")
        owner = await self.db.get(Users, playlist.owner_id)

        result = await self.db.execute(
            select(Video, Users)
            .select_from(PlaylistVideo)
            .join(Video, Video.id == PlaylistVideo.video_id)
            .outerjoin(Users, Users.id == Video.owner_id)
            .where(
                PlaylistVideo.playlist_id == playlist_id,
                visible_to(viewer_id),
            )
            .order_by(PlaylistVideo.added_at, PlaylistVideo.id)
        )

        detail = PlaylistDetail.model_validate(playlist)
        detail.owner = OwnerSummary.model_validate(owner) if owner is not None else None
        detail.videos = [video_with_channel(row) for row in result.all()]
        return detail

    async def list_by_owner(
        self, owner_id: UUID, viewer_id: UUID, page: int = 1, limit: int = 10
    ) -> Page:
        await get_or_404(self.db, Users, owner_id, "User")

        total_videos = (
            select(func.count(PlaylistVideo.id))
            .select_from(PlaylistVideo)
            .join(Video, Video.id == PlaylistVideo.video_id)
            .where(PlaylistVideo.playlist_id == Playlist.id, visible_to(viewer_id))
            .correlate(Playlist)
            .scalar_subquery()
        )
        stmt = (
            select(Playlist, total_videos.label("total_videos"))
            .where(Playlist.owner_id == owner_id)
            .order_by(Playlist.created_at.desc(), Playlist.id)
        )
        count_stmt = select(func.count(Playlist.id)).where(Playlist.owner_id == owner_id)

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, playlist_summary)

    async def update(
        self,
        playlist_id: UUID,
        user: Users,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PlaylistDetail:
        name = optional_text(name, "name")
        playlist = await get_or_404(self.db, Playlist, playlist_id, "Playlist")
        ensure_owner(playlist, user.id, "update")

        if name is not None:
            playlist.name = name
        if description is not None:
            playlist.description = description.strip()
        await self.db.commit()

        return await self.get(playlist_id, user.id)

    async def delete(self, playlist_id: UUID, user: Users) -> None:
        playlist = await get_or_404(self.db, Playlist, playlist_id, "Playlist")
        ensure_owner(playlist, user.id, "delete")

        await self.db.execute(delete(Playlist).where(Playlist.id == playlist_id))
        await self.db.commit()
        logger.info(f"Playlist {playlist_id} deleted by {user.id}")

    async def add_video(self, playlist_id: UUID, video_id: UUID, user: Users) -> PlaylistDetail:
        playlist = await get_or_404(self.db, Playlist, playlist_id, "Playlist")
        ensure_owner(playlist, user.id, "update")
        await get_visible_video(self.db, video_id, user.id)

        await self.db.execute(
            insert_ignore(self.db, PlaylistVideo).values(playlist_id=playlist_id, video_id=video_id)
        )
        await self.db.commit()

        logger.info(f"Video {video_id} added to playlist {playlist_id}")
        return await self.get(playlist_id, user.id)

    async def remove_video(self, playlist_id: UUID, video_id: UUID, user: Users) -> PlaylistDetail:
        playlist = await get_or_404(self.db, Playlist, playlist_id, "Playlist")
        ensure_owner(playlist, user.id, "update")

        removed = await self.db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            )
        )
        if not removed.rowcount:
            raise NotFound("Video is not in this playlist")
        await self.db.commit()

        logger.info(f"Video {video_id} removed from playlist {playlist_id}")
        return await self.get(playlist_id, user.id)
