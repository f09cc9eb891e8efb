from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    status: int = Field(default=200)
    data: Optional[T] = None
    message: str = Field(default="Success")


class Page(CamelModel, Generic[T]):
    items: List[T]
    total_items: int
    page: int
    total_pages: int


class OwnerSummary(CamelModel):
    id: UUID
    username: str
    avatar: str


class ChannelSummary(OwnerSummary):
    full_name: str


class Timestamps(CamelModel):
    created_at: datetime
    updated_at: datetime
