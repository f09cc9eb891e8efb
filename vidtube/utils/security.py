from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from uuid import UUID, uuid4

import jwt
from fastapi import Depends
from fastapi.security import APIKeyCookie, APIKeyHeader
from loguru import logger
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import JWTSettings
from vidtube.core.exceptions import Unauthorized
from vidtube.db.database import get_db
from vidtube.models.users import Users

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

auth_scheme = APIKeyHeader(name="Authorization", scheme_name="Bearer", auto_error=False)
cookie_scheme = APIKeyCookie(name=ACCESS_COOKIE, scheme_name="AccessCookie", auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@lru_cache
def get_jwt_settings() -> JWTSettings:
    return JWTSettings()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def _encode(to_encode: dict, token_type: str, secret_key: str, expire_minutes: int) -> str:
    settings = get_jwt_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)
    payload = dict(to_encode)
    payload.update({"exp": expire, "type": token_type, "jti": uuid4().hex})
    return jwt.encode(payload, secret_key, algorithm=settings.algorithm)


def create_access_token(to_encode: dict) -> str:
    settings = get_jwt_settings()
    return _encode(to_encode, "access", settings.secret_key, settings.access_token_expire_minutes)


def create_refresh_token(to_encode: dict) -> str:
    settings = get_jwt_settings()
    return _encode(
        to_encode, "refresh", settings.refresh_token_secret_key, settings.refresh_token_expire_minutes
    )


def verify_token(token: str, secret_key: str, algorithm: str) -> dict:
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Could not validate credentials")


def decode_user_id(token: str, token_type: str) -> UUID:
    """Verify ``token`` as an access or refresh token and return the user id it carries."""
    settings = get_jwt_settings()
    secret_key = settings.secret_key if token_type == "access" else settings.refresh_token_secret_key
    payload = verify_token(token, secret_key, settings.algorithm)

    if payload.get("type") != token_type:
        raise Unauthorized("Invalid token type")
    user_id = payload.get("id")
    if not user_id:
        raise Unauthorized("Invalid token payload")
    try:
        return UUID(user_id)
    except (ValueError, TypeError):
        raise Unauthorized("Invalid token payload")


def extract_token(header_value: Optional[str], cookie_value: Optional[str]) -> Optional[str]:
    if cookie_value:
        return cookie_value
    if header_value and header_value.startswith("Bearer "):
        return header_value[7:].strip() or None
    return None


async def get_current_user(
    token: Optional[str] = Depends(auth_scheme),
    cookie_token: Optional[str] = Depends(cookie_scheme),
    db: AsyncSession = Depends(get_db),
) -> Users:
    raw_token = extract_token(token, cookie_token)
    if not raw_token:
        raise Unauthorized("Unauthorized request")

    user_id = decode_user_id(raw_token, "access")

    user = await db.get(Users, user_id)
    if user is None:
        logger.debug(f"Access token for unknown user {user_id}")
        raise Unauthorized("Invalid access token")

    return user
