from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import InvalidArgument
from vidtube.db.database import insert_ignore
from vidtube.models.subscriptions import Subscription
from vidtube.models.users import Users
from vidtube.schemas.common import ChannelSummary, Page
from vidtube.schemas.subscription import SubscribedUser
from vidtube.services.lookups import get_or_404
from vidtube.services.pagination import paginate, to_page


def subscribed_user(row) -> SubscribedUser:
    user, subscribed_at = row
    return SubscribedUser(user=ChannelSummary.model_validate(user), subscribed_at=subscribed_at)


class SubscriptionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def toggle(self, channel_id: UUID, subscriber_id: UUID) -> bool:
        if channel_id == subscriber_id:
            raise InvalidArgument("You cannot subscribe to your own channel")
        await get_or_404(self.db, Users, channel_id, "Channel")

        removed = await self.db.execute(
            delete(Subscription).where(
                Subscription.channel_id == channel_id,
                Subscription.subscriber_id == subscriber_id,
            )
        )
        if removed.rowcount:
            await self.db.commit()
            logger.info(f"User {subscriber_id} unsubscribed from {channel_id}")
            return False

        await self.db.execute(
            insert_ignore(self.db, Subscription).values(
                channel_id=channel_id, subscriber_id=subscriber_id
            )
        )
        await self.db.commit()
        logger.info(f"User {subscriber_id} subscribed to {channel_id}")
        return True

    async def subscribers(self, channel_id: UUID, page: int = 1, limit: int = 10) -> Page:
        await get_or_404(self.db, Users, channel_id, "Channel")

        stmt = (
            select(Users, Subscription.created_at)
            .select_from(Subscription)
            .join(Users, Users.id == Subscription.subscriber_id)
            .where(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at.desc(), Subscription.id)
        )
        count_stmt = (
            select(func.count(Subscription.id))
            .select_from(Subscription)
            .join(Users, Users.id == Subscription.subscriber_id)
            .where(Subscription.channel_id == channel_id)
        )

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, subscribed_user)

    async def subscribed_channels(self, subscriber_id: UUID, page: int = 1, limit: int = 10) -> Page:
        await get_or_404(self.db, Users, subscriber_id, "User")

        stmt = (
            select(Users, Subscription.created_at)
            .select_from(Subscription)
            .join(Users, Users.id == Subscription.channel_id)
            .where(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at.desc(), Subscription.id)
        )
        count_stmt = (
            select(func.count(Subscription.id))
            .select_from(Subscription)
            .join(Users, Users.id == Subscription.channel_id)
            .where(Subscription.subscriber_id == subscriber_id)
        )

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, subscribed_user)
