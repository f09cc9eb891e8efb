from typing import Optional, Tuple
from uuid import UUID

from fastapi import UploadFile
from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import Conflict, InvalidArgument, NotFound, Unauthorized
from vidtube.models.users import Users
from vidtube.models.videos import Video
from vidtube.models.watch_history import WatchHistory
from vidtube.schemas.common import ChannelSummary, Page
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.lookups import visible_to
from vidtube.services.media_service import MediaService
from vidtube.services.pagination import paginate, to_page, with_owner
from vidtube.utils.security import (
    create_access_token,
    create_refresh_token,
    decode_user_id,
    hash_password,
    verify_password,
)
from vidtube.utils.validators import require_text


class UserService:
    def __init__(self, db: AsyncSession, media: Optional[MediaService] = None):
        self.db = db
        self.media = media

    async def get_user_by_email(self, email: str) -> Optional[Users]:
        result = await self.db.execute(select(Users).where(Users.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[Users]:
        result = await self.db.execute(select(Users).where(Users.username == username))
        return result.scalar_one_or_none()

    async def register(
        self,
        full_name: str,
        email: str,
        username: str,
        password: str,
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile] = None,
    ) -> Users:
        full_name = require_text(full_name, "fullName")
        email = require_text(email, "email").lower()
        username = require_text(username, "username").lower()
        password = require_text(password, "password")

        if "@" not in email:
            raise InvalidArgument("email is not valid")

        if await self.get_user_by_email(email):
            raise Conflict("User with email already exists")
        if await self.get_user_by_username(username):
            raise Conflict("User with username already exists")

        avatar_file = await self.media.upload(avatar, "image", "Avatar")
        cover_file = None
        if cover_image is not None and cover_image.filename:
            try:
                cover_file = await self.media.upload(cover_image, "image", "Cover image")
            except Exception:
                await self.media.discard(avatar_file.public_id, "image")
                raise

        user = Users(
            full_name=full_name,
            email=email,
            username=username,
            password_hash=hash_password(password),
            avatar=avatar_file.url,
            avatar_public_id=avatar_file.public_id,
            cover_image=cover_file.url if cover_file else None,
            cover_image_public_id=cover_file.public_id if cover_file else None,
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Concurrent registration for {username} / {email}")
            await self.media.discard(avatar_file.public_id, "image")
            if cover_file:
                await self.media.discard(cover_file.public_id, "image")
            raise Conflict("User with email or username already exists")

        await self.db.refresh(user)
        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    async def _issue_tokens(self, user: Users) -> Tuple[str, str]:
        payload = {"id": str(user.id)}
        access_token = create_access_token(payload)
        refresh_token = create_refresh_token(payload)

        user.refresh_token = refresh_token
        await self.db.commit()
        await self.db.refresh(user)

        return access_token, refresh_token

    async def login(
        self,
        password: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Tuple[Users, str, str]:
        conditions = []
        if username and username.strip():
            conditions.append(Users.username == username.strip().lower())
        if email and email.strip():
            conditions.append(Users.email == email.strip().lower())
        if not conditions:
            raise InvalidArgument("username or email is required")

        result = await self.db.execute(select(Users).where(or_(*conditions)).limit(1))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFound("User does not exist")

        if not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid user credentials")

        access_token, refresh_token = await self._issue_tokens(user)
        logger.info(f"User {user.id} logged in")
        return user, access_token, refresh_token

    async def logout(self, user: Users) -> None:
        user.refresh_token = None
        await self.db.commit()
        logger.info(f"User {user.id} logged out")

    async def refresh_tokens(self, refresh_token: Optional[str]) -> Tuple[str, str]:
        if not refresh_token:
            raise Unauthorized("Unauthorized request")

        user_id = decode_user_id(refresh_token, "refresh")
        user = await self.db.get(Users, user_id)
        if user is None:
            raise Unauthorized("Invalid refresh token")
        if user.refresh_token != refresh_token:
            raise Unauthorized("Refresh token is expired or used")

        return await self._issue_tokens(user)

    async def watch_history(self, user_id: UUID, page: int, limit: int) -> Page:
        stmt = (
            select(Video, Users)
            .select_from(Video)
            .join(WatchHistory, WatchHistory.video_id == Video.id)
            .outerjoin(Users, Users.id == Video.owner_id)
            .where(WatchHistory.user_id == user_id, visible_to(user_id))
            .order_by(WatchHistory.watched_at.desc(), WatchHistory.id)
        )
        count_stmt = (
            select(func.count(WatchHistory.id))
            .select_from(WatchHistory)
            .join(Video, Video.id == WatchHistory.video_id)
            .where(WatchHistory.user_id == user_id, visible_to(user_id))
        )

        result = await paginate(self.db, stmt, count_stmt, page, limit)
        return to_page(result, lambda row: with_owner(VideoWithOwner, row[0], row[1], ChannelSummary))
