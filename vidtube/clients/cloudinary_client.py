from dataclasses import dataclass
from typing import Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from vidtube.core.config import CloudinarySettings
from vidtube.core.exceptions import MediaStoreError


@dataclass
class UploadedMedia:
    url: str
    public_id: str
    duration: float = 0.0


class CloudinaryClient:
    """Upload/destroy calls through the Cloudinary SDK, run off the event loop."""

    def __init__(self, settings: CloudinarySettings):
        self.settings = settings
        cloudinary.config(
            cloud_name=settings.cloud_name,
            api_key=settings.api_key,
            api_secret=settings.api_secret,
            secure=True,
        )

    async def _call(self, func, *args, **options) -> dict:
        try:
            return await run_in_threadpool(func, *args, timeout=self.settings.timeout, **options)
        except cloudinary.exceptions.Error as e:
            logger.error(f"Media store error: {e}")
            raise MediaStoreError(str(e) or "Media store request failed") from e

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str] = None,
        resource_type: str = "auto",
    ) -> UploadedMedia:
        options = {"resource_type": resource_type, "filename": filename}
        if self.settings.folder:
            options["folder"] = self.settings.folder

        data = await self._call(cloudinary.uploader.upload, content, **options)

        try:
            uploaded = UploadedMedia(
                url=data.get("secure_url") or data["url"],
                public_id=data["public_id"],
                duration=float(data.get("duration") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MediaStoreError("Unexpected upload response from media store") from e

        logger.info(f"Uploaded {resource_type} {uploaded.public_id} ({content_type or 'unknown type'})")
        return uploaded

    async def destroy(self, public_id: str, resource_type: str = "image") -> bool:
        """Remove a stored object. An object that is already gone counts as destroyed."""
        data = await self._call(
            cloudinary.uploader.destroy, public_id, resource_type=resource_type, invalidate=True
        )

        result = data.get("result")
        if result == "ok":
            logger.info(f"Destroyed {resource_type} {public_id}")
            return True
        if result == "not found":
            logger.debug(f"{resource_type} {public_id} already absent from media store")
            return True

        raise MediaStoreError(f"Unexpected destroy result for {public_id}: {result}")


_media_store: Optional[CloudinaryClient] = None


def get_media_store() -> CloudinaryClient:
    global _media_store
    if _media_store is None:
        _media_store = CloudinaryClient(CloudinarySettings())
    return _media_store
