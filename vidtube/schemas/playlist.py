from typing import List, Optional
from uuid import UUID

from pydantic import Field

from vidtube.schemas.common import CamelModel, OwnerSummary, Timestamps
from vidtube.schemas.video import VideoWithOwner


class PlaylistCreate(CamelModel):
    name: str = Field(..., max_length=255)
    description: str = Field(default="")


class PlaylistUpdate(CamelModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None)


class PlaylistResponse(Timestamps):
    id: UUID
    name: str
    description: str
    owner_id: UUID


class PlaylistSummary(PlaylistResponse):
    total_videos: int = 0


class PlaylistDetail(PlaylistResponse):
    owner: Optional[OwnerSummary] = None
    videos: List[VideoWithOwner] = Field(default_factory=list)
