from vidtube.models.users import Users
from vidtube.models.videos import Video
from vidtube.models.comments import Comment
from vidtube.models.tweets import Tweet
from vidtube.models.likes import Like
from vidtube.models.playlists import Playlist, PlaylistVideo
from vidtube.models.subscriptions import Subscription
from vidtube.models.watch_history import WatchHistory

__all__ = [
    "Users",
    "Video",
    "Comment",
    "Tweet",
    "Like",
    "Playlist",
    "PlaylistVideo",
    "Subscription",
    "WatchHistory",
]
