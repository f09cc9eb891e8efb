from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import Forbidden, NotFound
from vidtube.models.videos import Video


async def get_or_404(db: AsyncSession, model, entity_id: UUID, label: str):
    entity = await db.get(model, entity_id)
    if entity is None:
        raise NotFound(f"{label} not found")
    return entity


def visible_to(viewer_id: UUID):
    """Filter for videos ``viewer_id`` may see: published ones and their own."""
    return or_(Video.is_published.is_(True), Video.owner_id == viewer_id)


async def get_visible_video(db: AsyncSession, video_id: UUID, viewer_id: UUID) -> Video:
    video = await get_or_404(db, Video, video_id, "Video")
    # unpublished videos do not exist for anyone but their owner
    if not video.is_published and video.owner_id != viewer_id:
        raise NotFound("Video not found")
    return video


def ensure_owner(entity, user_id: UUID, action: str = "modify") -> None:
    if entity.owner_id != user_id:
        raise Forbidden(f"You are not allowed to {action} this {type(entity).__name__.lower()}")
