from typing import Optional

from pydantic import Field

from vidtube.schemas.common import CamelModel


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = Field(default=None)


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
