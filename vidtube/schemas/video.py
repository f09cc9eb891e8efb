from typing import Optional
from uuid import UUID

from vidtube.schemas.common import ChannelSummary, Timestamps


class VideoResponse(Timestamps):
    id: UUID
    owner_id: UUID
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool


class VideoWithOwner(VideoResponse):
    owner: Optional[ChannelSummary] = None


class PublishStatus(Timestamps):
    id: UUID
    is_published: bool
