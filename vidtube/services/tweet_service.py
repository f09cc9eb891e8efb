from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.tweets import Tweet
from vidtube.models.users import Users
from vidtube.schemas.common import Page
from vidtube.schemas.tweet import TweetWithOwner
from vidtube.services.lookups import ensure_owner, get_or_404
from vidtube.services.pagination import paginate, to_page, with_owner
from vidtube.utils.validators import require_text


class TweetService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: Users, content: str) -> TweetWithOwner:
        tweet = Tweet(content=require_text(content, "content"), owner_id=user.id)
        self.db.add(tweet)
        await self.db.commit()
        await self.db.refresh(tweet)

        logger.info(f"User {user.id} tweeted {tweet.id}")
        return with_owner(TweetWithOwner, tweet, user)

    async def list_by_owner(self, owner_id: UUID, page: int = 1, limit: int = 10) -> Page:
        await get_or_404(self.db, Users, owner_id, "User")

        stmt = (
            select(Tweet, Users)
            .select_from(Tweet)
            .outerjoin(Users, Users.id == Tweet.owner_id)
            .where(Tweet.owner_id == owner_id)
            .order_by(Tweet.created_at.desc(), Tweet.id)
        )
        count_stmt = select(func.count(Tweet.id)).where(Tweet.owner_id == owner_id)

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, lambda row: with_owner(TweetWithOwner, row[0], row[1]))

    async def update(self, tweet_id: UUID, user: Users, content: str) -> TweetWithOwner:
        content = require_text(content, "content")
        tweet = await get_or_404(self.db, Tweet, tweet_id, "Tweet")
        ensure_owner(tweet, user.id, "update")

        tweet.content = content
        await self.db.commit()
        await self.db.refresh(tweet)
        return with_owner(TweetWithOwner, tweet, user)

    async def delete(self, tweet_id: UUID, user: Users) -> None:
        tweet = await get_or_404(self.db, Tweet, tweet_id, "Tweet")
        ensure_owner(tweet, user.id, "delete")

        await self.db.execute(delete(Tweet).where(Tweet.id == tweet_id))
        await self.db.commit()
        logger.info(f"Tweet {tweet_id} deleted by {user.id}")
