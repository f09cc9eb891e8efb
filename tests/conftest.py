import os
import tempfile

os.environ.setdefault("APP_NAME", "VidTube Test")
os.environ.setdefault("APP_PORT", "8000")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "vidtube-tests.log"))
os.environ.setdefault("SECRET_KEY", "test-access-secret-key-0123456789abcdef")
os.environ.setdefault("REFRESH_TOKEN_SECRET_KEY", "test-refresh-secret-key-0123456789abcdef")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
os.environ.setdefault("REFRESH_TOKEN_EXPIRE_MINUTES", "1440")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vidtube.clients.cloudinary_client import UploadedMedia, get_media_store
from vidtube.core.exceptions import MediaStoreError
from vidtube.db.database import get_db, init_models
from vidtube.main import create_app

API = "/api/v1"


class FakeMediaStore:
    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.fail_uploads = False
        # uploads allowed before every further one fails
        self.fail_after = None

    async def upload(self, content, filename, content_type=None, resource_type="auto"):
        if self.fail_uploads or (self.fail_after is not None and len(self.uploads) >= self.fail_after):
            raise MediaStoreError("upload failed")
        public_id = f"{resource_type}-{len(self.uploads) + 1}"
        self.uploads.append((public_id, filename, resource_type))
        return UploadedMedia(
            url=f"https://media.test/{public_id}",
            public_id=public_id,
            duration=42.0 if resource_type == "video" else 0.0,
        )

    async def destroy(self, public_id, resource_type="image"):
        self.destroyed.append((public_id, resource_type))
        return True


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def app(session_factory, media_store):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media_store
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(client):
    async def _register(username, password="secret-pass", email=None, cover=False):
        files = {"avatar": ("avatar.png", b"avatar-bytes", "image/png")}
        if cover:
            files["coverImage"] = ("cover.png", b"cover-bytes", "image/png")
        return await client.post(
            f"{API}/users/register",
            data={
                "fullName": f"{username.title()} Doe",
                "email": email or f"{username}@example.com",
                "username": username,
                "password": password,
            },
            files=files,
        )

    return _register


@pytest.fixture
def make_user(client, register_user):
    """Register and log in a user; returns the public user and bearer headers."""

    async def _make_user(username, password="secret-pass"):
        response = await register_user(username, password)
        assert response.status_code == 201, response.text

        login = await client.post(f"{API}/users/login", json={"username": username, "password": password})
        assert login.status_code == 200, login.text
        client.cookies.clear()

        token = login.json()["data"]["accessToken"]
        return response.json()["data"], {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
def publish_video(client):
    async def _publish(headers, title="My video", description="What it is about"):
        response = await client.post(
            f"{API}/videos",
            data={"title": title, "description": description},
            files={
                "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
                "thumbnail": ("thumb.png", b"thumb-bytes", "image/png"),
            },
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _publish
