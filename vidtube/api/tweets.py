from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.tweet import TweetCreate, TweetWithOwner
from vidtube.services.tweet_service import TweetService
from vidtube.utils.security import get_current_user
from vidtube.utils.validators import parse_uuid

tweets_router = APIRouter()


@tweets_router.post("", response_model=ApiResponse[TweetWithOwner], status_code=status.HTTP_201_CREATED)
async def create_tweet(
    payload: TweetCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await TweetService(db).create(current_user, payload.content)
    return ApiResponse(status=status.HTTP_201_CREATED, data=tweet, message="Tweet created successfully")


@tweets_router.get("/user/{user_id}", response_model=ApiResponse[Page[TweetWithOwner]])
async def list_user_tweets(
    user_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweets = await TweetService(db).list_by_owner(parse_uuid(user_id, "user id"), page, limit)
    return ApiResponse(data=tweets, message="Tweets fetched successfully")


@tweets_router.patch("/{tweet_id}", response_model=ApiResponse[TweetWithOwner])
async def update_tweet(
    tweet_id: str,
    payload: TweetCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await TweetService(db).update(parse_uuid(tweet_id, "tweet id"), current_user, payload.content)
    return ApiResponse(data=tweet, message="Tweet updated successfully")


@tweets_router.delete("/{tweet_id}", response_model=ApiResponse[dict])
async def delete_tweet(
    tweet_id: str,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await TweetService(db).delete(parse_uuid(tweet_id, "tweet id"), current_user)
    return ApiResponse(data={}, message="Tweet deleted successfully")
