from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import insert_ignore
from vidtube.models.comments import Comment
from vidtube.models.likes import Like
from vidtube.models.tweets import Tweet
from vidtube.models.users import Users
from vidtube.models.videos import Video
from vidtube.schemas.common import Page
from vidtube.services.lookups import get_or_404, get_visible_video, visible_to
from vidtube.services.pagination import paginate, to_page
from vidtube.services.video_service import video_with_channel

SUBJECTS = {
    "video": (Video, Like.video_id, "Video"),
    "comment": (Comment, Like.comment_id, "Comment"),
    "tweet": (Tweet, Like.tweet_id, "Tweet"),
}


class LikeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def toggle(self, subject: str, subject_id: UUID, user_id: UUID) -> bool:
        """Flip the like of ``user_id`` on a subject. Returns the new state.

        Unliking is a single conditional delete; liking is an insert that the
        unique (subject, user) constraint turns into a no-op when a concurrent
        request already inserted the row.
        """
        model, column, label = SUBJECTS[subject]
        if model is Video:
            await get_visible_video(self.db, subject_id, user_id)
        else:
            entity = await get_or_404(self.db, model, subject_id, label)
            if model is Comment:
                await get_visible_video(self.db, entity.video_id, user_id)

        removed = await self.db.execute(
            delete(Like).where(column == subject_id, Like.liked_by_id == user_id)
        )
        if removed.rowcount:
            await self.db.commit()
            logger.info(f"User {user_id} unliked {subject} {subject_id}")
            return False

        await self.db.execute(
            insert_ignore(self.db, Like).values({column.key: subject_id, "liked_by_id": user_id})
        )
        await self.db.commit()
        logger.info(f"User {user_id} liked {subject} {subject_id}")
        return True

    async def liked_videos(self, user_id: UUID, page: int = 1, limit: int = 10) -> Page:
        # paginates over likes whose video still resolves and is visible to the user
        stmt = (
            select(Video, Users)
            .select_from(Video)
            .join(Like, Like.video_id == Video.id)
            .outerjoin(Users, Users.id == Video.owner_id)
            .where(Like.liked_by_id == user_id, visible_to(user_id))
            .order_by(Like.created_at.desc(), Like.id)
        )
        count_stmt = (
            select(func.count(Like.id))
            .select_from(Like)
            .join(Video, Video.id == Like.video_id)
            .where(Like.liked_by_id == user_id, visible_to(user_id))
        )

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, video_with_channel)
