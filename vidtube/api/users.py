from typing import Optional

from fastapi import APIRouter, Cookie, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.clients.cloudinary_client import CloudinaryClient, get_media_store
from vidtube.core.config import AppSettings, get_app_settings
from vidtube.db.database import get_db
from vidtube.models.users import Users
from vidtube.schemas.common import ApiResponse, Page
from vidtube.schemas.token import RefreshRequest, TokenPair
from vidtube.schemas.user import LoginRequest, LoginResponse, UserResponse
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.media_service import MediaService
from vidtube.services.user_service import UserService
from vidtube.utils.security import ACCESS_COOKIE, REFRESH_COOKIE, get_current_user

users_router = APIRouter()


def set_auth_cookies(response: Response, settings: AppSettings, access_token: str, refresh_token: str):
    options = {"httponly": True, "secure": settings.cookie_secure}
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)


@users_router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    full_name: str = Form(..., alias="fullName"),
    email: str = Form(...),
    username: str = Form(...),
    password: str = Form(...),
    avatar: UploadFile = File(...),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: AsyncSession = Depends(get_db),
    media_store: CloudinaryClient = Depends(get_media_store),
):
    user_service = UserService(db, MediaService(media_store))
    user = await user_service.register(
        full_name=full_name,
        email=email,
        username=username,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )
    return ApiResponse(
        status=status.HTTP_201_CREATED,
        data=UserResponse.model_validate(user),
        message="User registered successfully",
    )


@users_router.post("/login", response_model=ApiResponse[LoginResponse])
async def login_user(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
):
    user, access_token, refresh_token = await UserService(db).login(
        password=payload.password,
        username=payload.username,
        email=payload.email,
    )
    set_auth_cookies(response, settings, access_token, refresh_token)
    return ApiResponse(
        data=LoginResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        ),
        message="User logged in successfully",
    )


@users_router.post("/logout", response_model=ApiResponse[dict])
async def logout_user(
    response: Response,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
):
    await UserService(db).logout(current_user)
    options = {"httponly": True, "secure": settings.cookie_secure}
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return ApiResponse(data={}, message="User logged out")


@users_router.post("/refresh-token", response_model=ApiResponse[TokenPair])
async def refresh_access_token(
    response: Response,
    payload: Optional[RefreshRequest] = None,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    db: AsyncSession = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
):
    incoming = refresh_cookie or (payload.refresh_token if payload else None)
    access_token, refresh_token = await UserService(db).refresh_tokens(incoming)
    set_auth_cookies(response, settings, access_token, refresh_token)
    return ApiResponse(
        data=TokenPair(access_token=access_token, refresh_token=refresh_token),
        message="Access token refreshed",
    )


@users_router.get("/current-user", response_model=ApiResponse[UserResponse])
async def current_user_profile(current_user: Users = Depends(get_current_user)):
    return ApiResponse(
        data=UserResponse.model_validate(current_user),
        message="Current user fetched successfully",
    )


@users_router.get("/history", response_model=ApiResponse[Page[VideoWithOwner]])
async def watch_history(
    page: int = Query(1),
    limit: int = Query(10),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    history = await UserService(db).watch_history(current_user.id, page, limit)
    return ApiResponse(data=history, message="Watch history fetched successfully")
