from typing import Optional
from uuid import UUID

from pydantic import Field

from vidtube.schemas.common import CamelModel, Timestamps


class UserResponse(Timestamps):
    id: UUID
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: Optional[str] = None


class LoginRequest(CamelModel):
    username: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str
