from typing import Optional
from uuid import UUID

from pydantic import Field

from vidtube.schemas.common import CamelModel, OwnerSummary, Timestamps


class TweetCreate(CamelModel):
    content: str = Field(..., max_length=280)


class TweetResponse(Timestamps):
    id: UUID
    content: str
    owner_id: UUID


class TweetWithOwner(TweetResponse):
    owner: Optional[OwnerSummary] = None
