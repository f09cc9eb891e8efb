from typing import Optional
from uuid import UUID

from fastapi import UploadFile
from loguru import logger
from sqlalchemy import delete, func, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import InvalidArgument
from vidtube.db.database import insert_ignore
from vidtube.models.users import Users
from vidtube.models.videos import Video
from vidtube.models.watch_history import WatchHistory
from vidtube.schemas.common import ChannelSummary, Page
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.lookups import ensure_owner, get_or_404, get_visible_video
from vidtube.services.media_service import MediaService
from vidtube.services.pagination import order_by, paginate, to_page, with_owner
from vidtube.utils.validators import optional_text, require_text

SORTABLE_FIELDS = {
    "title": Video.title,
    "createdAt": Video.created_at,
    "created_at": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
}


def video_with_channel(row) -> VideoWithOwner:
    video, owner = row
    return with_owner(VideoWithOwner, video, owner, ChannelSummary)


class VideoService:
    def __init__(self, db: AsyncSession, media: Optional[MediaService] = None):
        self.db = db
        self.media = media

    async def list_by_owner(
        self,
        owner_id: UUID,
        viewer_id: UUID,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_type: str = "desc",
    ) -> Page:
        await get_or_404(self.db, Users, owner_id, "User")

        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise InvalidArgument(f"Cannot sort videos by {sort_by}")

        conditions = [Video.owner_id == owner_id]
        if owner_id != viewer_id:
            conditions.append(Video.is_published.is_(True))

        stmt = (
            select(Video, Users)
            .select_from(Video)
            .outerjoin(Users, Users.id == Video.owner_id)
            .where(*conditions)
            .order_by(order_by(column, sort_type), Video.id)
        )
        count_stmt = select(func.count(Video.id)).where(*conditions)

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, video_with_channel)

    async def publish(
        self,
        owner: Users,
        title: str,
        description: str,
        video_file: Optional[UploadFile],
        thumbnail: Optional[UploadFile],
    ) -> VideoWithOwner:
        title = require_text(title, "title")
        description = require_text(description, "description")
        if video_file is None:
            raise InvalidArgument("Video file is required")
        if thumbnail is None:
            raise InvalidArgument("Thumbnail file is required")

        uploaded_video = await self.media.upload(video_file, "video", "Video")
        try:
            uploaded_thumbnail = await self.media.upload(thumbnail, "image", "Thumbnail")
        except Exception:
            await self.media.discard(uploaded_video.public_id, "video")
            raise

        video = Video(
            owner_id=owner.id,
            title=title,
            description=description,
            video_file=uploaded_video.url,
            video_public_id=uploaded_video.public_id,
            duration=uploaded_video.duration,
            thumbnail=uploaded_thumbnail.url,
            thumbnail_public_id=uploaded_thumbnail.public_id,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"User {owner.id} published video {video.id}")
        return with_owner(VideoWithOwner, video, owner, ChannelSummary)

    async def get_for_viewer(self, video_id: UUID, viewer_id: UUID) -> VideoWithOwner:
        """Fetch a video and count the view once per user."""
        video = await get_visible_video(self.db, video_id, viewer_id)

        inserted = await self.db.execute(
            insert_ignore(self.db, WatchHistory).values(user_id=viewer_id, video_id=video_id)
        )
        if inserted.rowcount:
            await self.db.execute(
                update(Video).where(Video.id == video_id).values(views=Video.views + 1)
            )
            logger.debug(f"First view of {video_id} by {viewer_id}")
        await self.db.commit()

        await self.db.refresh(video)
        owner = await self.db.get(Users, video.owner_id)
        return with_owner(VideoWithOwner, video, owner, ChannelSummary)

    async def update(
        self,
        video_id: UUID,
        user: Users,
        title: Optional[str] = None,
        description: Optional[str] = None,
        video_file: Optional[UploadFile] = None,
        thumbnail: Optional[UploadFile] = None,
    ) -> VideoWithOwner:
        title = optional_text(title, "title")
        description = optional_text(description, "description")

        video = await get_or_404(self.db, Video, video_id, "Video")
        ensure_owner(video, user.id, "update")

        # new media goes up before anything is committed or destroyed
        new_video = await self.media.upload(video_file, "video", "Video") if video_file is not None else None
        try:
            new_thumbnail = (
                await self.media.upload(thumbnail, "image", "Thumbnail") if thumbnail is not None else None
            )
        except Exception:
            if new_video:
                await self.media.discard(new_video.public_id, "video")
            raise

        old_video_id = video.video_public_id
        old_thumbnail_id = video.thumbnail_public_id

        if title is not None:
            video.title = title
        if description is not None:
            video.description = description
        if new_video:
            video.video_file = new_video.url
            video.video_public_id = new_video.public_id
            video.duration = new_video.duration
        if new_thumbnail:
            video.thumbnail = new_thumbnail.url
            video.thumbnail_public_id = new_thumbnail.public_id

        await self.db.commit()
        await self.db.refresh(video)

        if new_video:
            await self.media.discard(old_video_id, "video")
        if new_thumbnail:
            await self.media.discard(old_thumbnail_id, "image")

        logger.info(f"Video {video.id} updated by {user.id}")
        return with_owner(VideoWithOwner, video, user, ChannelSummary)

    async def delete(self, video_id: UUID, user: Users) -> None:
        video = await get_or_404(self.db, Video, video_id, "Video")
        ensure_owner(video, user.id, "delete")

        # destroying an already removed object succeeds, so a retried delete converges
        await self.media.destroy(video.video_public_id, "video")
        await self.media.destroy(video.thumbnail_public_id, "image")

        await self.db.execute(delete(Video).where(Video.id == video_id))
        await self.db.commit()
        logger.info(f"Video {video_id} deleted by {user.id}")

    async def toggle_publish(self, video_id: UUID, user: Users) -> Video:
        video = await get_or_404(self.db, Video, video_id, "Video")
        ensure_owner(video, user.id, "update")

        await self.db.execute(
            update(Video).where(Video.id == video_id).values(is_published=not_(Video.is_published))
        )
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"Video {video_id} is_published={video.is_published}")
        return video
