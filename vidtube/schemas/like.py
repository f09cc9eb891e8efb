from vidtube.schemas.common import CamelModel


class LikeStatus(CamelModel):
    is_liked: bool
