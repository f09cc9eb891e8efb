import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
import pytest

from vidtube.clients.cloudinary_client import CloudinaryClient
from vidtube.core.config import CloudinarySettings
from vidtube.core.exceptions import MediaStoreError


def make_client(**overrides):
    settings = CloudinarySettings(
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key-123",
        CLOUDINARY_API_SECRET="abcd",
        **overrides,
    )
    return CloudinaryClient(settings)


@pytest.fixture
def calls(monkeypatch):
    """Replace the SDK uploader; each entry records (name, positional arg, options)."""
    recorded = []
    responses = {"upload": {}, "destroy": {"result": "ok"}}

    def fake(name):
        def _call(arg, **options):
            recorded.append((name, arg, options))
            response = responses[name]
            if isinstance(response, Exception):
                raise response
            return response

        return _call

    monkeypatch.setattr(cloudinary.uploader, "upload", fake("upload"))
    monkeypatch.setattr(cloudinary.uploader, "destroy", fake("destroy"))
    return recorded, responses


def test_client_configures_sdk_credentials():
    make_client()

    config = cloudinary.config()
    assert config.cloud_name == "demo"
    assert config.api_key == "key-123"
    assert config.api_secret == "abcd"


async def test_upload_passes_bytes_and_options(calls):
    recorded, responses = calls
    responses["upload"] = {
        "public_id": "folder/clip",
        "secure_url": "https://res.cloudinary.com/demo/video/upload/clip.mp4",
        "url": "http://res.cloudinary.com/demo/video/upload/clip.mp4",
        "duration": 12.5,
    }
    client = make_client(CLOUDINARY_FOLDER="folder")

    uploaded = await client.upload(b"video-bytes", "clip.mp4", "video/mp4", resource_type="video")

    name, content, options = recorded[0]
    assert name == "upload"
    assert content == b"video-bytes"
    assert options["resource_type"] == "video"
    assert options["folder"] == "folder"
    assert options["filename"] == "clip.mp4"
    assert uploaded.public_id == "folder/clip"
    assert uploaded.url.startswith("https://")
    assert uploaded.duration == 12.5


async def test_upload_with_incomplete_response_raises(calls):
    _, responses = calls
    responses["upload"] = {"secure_url": "https://res.cloudinary.com/demo/image/upload/x.png"}
    client = make_client()

    with pytest.raises(MediaStoreError):
        await client.upload(b"x", "x.png", "image/png", resource_type="image")


async def test_upload_sdk_error_raises(calls):
    _, responses = calls
    responses["upload"] = cloudinary.exceptions.GeneralError("no route")
    client = make_client()

    with pytest.raises(MediaStoreError):
        await client.upload(b"x", "x.png", "image/png", resource_type="image")


async def test_destroy_passes_resource_type(calls):
    recorded, _ = calls
    client = make_client()

    assert await client.destroy("sample", resource_type="video") is True
    name, public_id, options = recorded[0]
    assert (name, public_id, options["resource_type"]) == ("destroy", "sample", "video")


async def test_destroy_of_missing_object_succeeds(calls):
    _, responses = calls
    responses["destroy"] = {"result": "not found"}
    client = make_client()

    assert await client.destroy("gone") is True


async def test_destroy_unexpected_result_raises(calls):
    _, responses = calls
    responses["destroy"] = {"result": "error"}
    client = make_client()

    with pytest.raises(MediaStoreError):
        await client.destroy("sample")


async def test_destroy_sdk_error_raises(calls):
    _, responses = calls
    responses["destroy"] = cloudinary.exceptions.Error("boom")
    client = make_client()

    with pytest.raises(MediaStoreError):
        await client.destroy("sample")
