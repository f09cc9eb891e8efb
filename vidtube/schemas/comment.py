from typing import Optional
from uuid import UUID

from pydantic import Field

from vidtube.schemas.common import CamelModel, OwnerSummary, Timestamps


class CommentCreate(CamelModel):
    content: str = Field(..., max_length=5000)


class CommentResponse(Timestamps):
    id: UUID
    content: str
    video_id: UUID
    owner_id: UUID


class CommentWithOwner(CommentResponse):
    owner: Optional[OwnerSummary] = None
