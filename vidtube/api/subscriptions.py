from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.subscription import SubscribedUser, SubscriptionStatus
from vidtube.services.subscription_service import SubscriptionService
from vidtube.utils.security import get_current_user
from vidtube.utils.validators import parse_uuid

subscriptions_router = APIRouter()


@subscriptions_router.post("/c/{channel_id}", response_model=ApiResponse[SubscriptionStatus])
async def toggle_subscription(
    channel_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    is_subscribed = await SubscriptionService(db).toggle(parse_uuid(channel_id, "channel id"), current_user.id)
    return ApiResponse(
        data=SubscriptionStatus(is_subscribed=is_subscribed),
        message="Subscription toggled successfully",
    )


@subscriptions_router.get("/c/{channel_id}", response_model=ApiResponse[Page[SubscribedUser]])
async def channel_subscribers(
    channel_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscribers = await SubscriptionService(db).subscribers(parse_uuid(channel_id, "channel id"), page, limit)
    return ApiResponse(data=subscribers, message="Subscribers fetched successfully")


@subscriptions_router.get("/u/{subscriber_id}", response_model=ApiResponse[Page[SubscribedUser]])
async def subscribed_channels(
    subscriber_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    channels = await SubscriptionService(db).subscribed_channels(
        parse_uuid(subscriber_id, "subscriber id"), page, limit
    )
    return ApiResponse(data=channels, message="Subscribed channels fetched successfully")
