from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import Forbidden
from vidtube.models.comments import Comment
from vidtube.models.users import Users
from vidtube.models.videos import Video
from vidtube.schemas.common import Page
from vidtube.schemas.comment import CommentWithOwner
from vidtube.services.lookups import ensure_owner, get_or_404, get_visible_video
from vidtube.services.pagination import paginate, to_page, with_owner
from vidtube.utils.validators import require_text


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_video(
        self, video_id: UUID, viewer_id: UUID, page: int = 1, limit: int = 10
    ) -> Page:
        await get_visible_video(self.db, video_id, viewer_id)

        stmt = (
            select(Comment, Users)
            .select_from(Comment)
            .outerjoin(Users, Users.id == Comment.owner_id)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id)
        )
        count_stmt = select(func.count(Comment.id)).where(Comment.video_id == video_id)

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, lambda row: with_owner(CommentWithOwner, row[0], row[1]))

    async def add(self, video_id: UUID, user: Users, content: str) -> CommentWithOwner:
        content = require_text(content, "content")
        await get_visible_video(self.db, video_id, user.id)

        comment = Comment(content=content, video_id=video_id, owner_id=user.id)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(f"User {user.id} commented {comment.id} on video {video_id}")
        return with_owner(CommentWithOwner, comment, user)

    async def update(self, comment_id: UUID, user: Users, content: str) -> CommentWithOwner:
        content = require_text(content, "content")
        comment = await get_or_404(self.db, Comment, comment_id, "Comment")
        ensure_owner(comment, user.id, "update")

        comment.content = content
        await self.db.commit()
        await self.db.refresh(comment)

        return with_owner(CommentWithOwner, comment, user)

    async def delete(self, comment_id: UUID, user: Users) -> None:
        """The comment's author and the owner of the commented video may delete it."""
        comment = await get_or_404(self.db, Comment, comment_id, "Comment")

        if comment.owner_id != user.id:
            video = await self.db.get(Video, comment.video_id)
            if video is None or video.owner_id != user.id:
                raise Forbidden("You are not allowed to delete this comment")

        await self.db.execute(delete(Comment).where(Comment.id == comment_id))
        await self.db.commit()
        logger.info(f"Comment {comment_id} deleted by {user.id}")
