from typing import Optional

from fastapi import UploadFile
from loguru import logger

from vidtube.clients.cloudinary_client import CloudinaryClient, UploadedMedia
from vidtube.core.exceptions import InternalError, InvalidArgument, MediaStoreError


class MediaService:
    def __init__(self, media_store: CloudinaryClient):
        self.media_store = media_store

    async def upload(self, file: Optional[UploadFile], resource_type: str, label: str) -> UploadedMedia:
        if file is None:
            raise InvalidArgument(f"{label} file is required")

        content = await file.read()
        if not content:
            raise InvalidArgument(f"{label} file is empty")

        try:
            return await self.media_store.upload(
                content,
                filename=file.filename or label.lower(),
                content_type=file.content_type,
                resource_type=resource_type,
            )
        except MediaStoreError as e:
            raise InternalError(f"Error while uploading {label.lower()}") from e

    async def destroy(self, public_id: Optional[str], resource_type: str) -> None:
        if not public_id:
            return
        try:
            await self.media_store.destroy(public_id, resource_type=resource_type)
        except MediaStoreError as e:
            raise InternalError("Error while deleting media") from e

    async def discard(self, public_id: Optional[str], resource_type: str) -> None:
        """Destroy an object that no committed row points at any more; failures only leave an orphan."""
        if not public_id:
            return
        try:
            await self.media_store.destroy(public_id, resource_type=resource_type)
        except MediaStoreError as e:
            logger.warning(f"Orphaned {resource_type} {public_id} left in media store: {e}")
