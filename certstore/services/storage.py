"""Object storage for certificate images."""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from certstore.config import Settings, settings as default_settings
from certstore.exceptions import UploadError
from certstore.models import ImageUpload

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    async def upload(self, file_data: bytes, key: str, content_type: str) -> str:
        """Upload file to storage, replacing any object at the same key.

        Args:
            file_data: File data as bytes
            key: Storage key/path inside the bucket
            content_type: MIME type of the file

        Returns:
            Storage key

        Raises:
            UploadError: If the store rejects the upload
        """
        pass


class S3Storage(StorageBackend):
    """S3-compatible storage backend (Supabase Storage, AWS S3, MinIO)."""

    def __init__(self, config: Settings):
        """Initialize S3 client."""
        self.bucket_name = config.storage_bucket

        self.s3_client = boto3.client(
            "s3",
            aws_access_key_id=config.storage_access_key_id,
            aws_secret_access_key=config.storage_secret_access_key,
            region_name=config.storage_region,
            endpoint_url=config.storage_s3_endpoint,
        )

    async def upload(self, file_data: bytes, key: str, content_type: str) -> str:
        """Upload file to the bucket.

        Returns:
            S3 object key
        """
        try:
            # put_object blocks; run it off the event loop
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=file_data,
                ContentType=content_type,
            )
            return key

        except NoCredentialsError as e:
            raise UploadError("Object storage credentials not configured") from e
        except ClientError as e:
            error = e.response.get("Error", {})
            message = error.get("Message") or error.get("Code") or str(e)
            raise UploadError(message) from e
        except BotoCoreError as e:
            raise UploadError(str(e)) from e


class LocalStorage(StorageBackend):
    """Local file system storage backend."""

    def __init__(self, config: Settings):
        """Initialize local storage."""
        self.base_path = Path(config.local_storage_path) / config.storage_bucket
        self.base_path.mkdir(parents=True, exist_ok=True)

    async def upload(self, file_data: bytes, key: str, content_type: str) -> str:
        """Save file to local storage, inside the bucket directory only."""
        base_path = self.base_path.resolve()
        file_path = (base_path / key).resolve()
        if not file_path.is_relative_to(base_path):
            raise UploadError(f"Invalid object key: {key}")

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(file_path.write_bytes, file_data)
        except OSError as e:
            raise UploadError(f"Failed to write {key}: {e.strerror}") from e

        return str(key)


class StorageService:
    """Storage service with backend abstraction.

    Objects are always stored at ``<folder>/<original filename>``, so two
    uploads with the same filename replace one another.
    """

    def __init__(
        self,
        backend: Optional[StorageBackend] = None,
        config: Optional[Settings] = None,
    ):
        """Initialize storage service with the given or configured backend."""
        self.config = config or default_settings

        if backend is not None:
            self.backend = backend
        elif self.config.storage_backend == "s3":
            self.backend = S3Storage(self.config)
        elif self.config.storage_backend == "local":
            self.backend = LocalStorage(self.config)
        else:
            raise ValueError(f"Unsupported storage backend: {self.config.storage_backend}")

    def object_key(self, filename: str) -> str:
        """Key of an uploaded image inside the bucket."""
        return f"{self.config.storage_folder}/{filename}"

    def public_url(self, filename: str) -> str:
        """Public URL an uploaded image is served from.

        Args:
            filename: Original client-supplied filename

        Returns:
            ``<base url><public path>/<bucket>/<folder>/<filename>``
        """
        return (
            f"{self.config.storage_base_url}{self.config.storage_public_path}"
            f"/{self.config.storage_bucket}/{self.object_key(filename)}"
        )

    async def upload_image(self, image: ImageUpload) -> str:
        """Upload an image under its original filename.

        Args:
            image: Uploaded file

        Returns:
            Storage key
        """
        key = self.object_key(image.filename)
        logger.info(f"Uploading {len(image.data)} bytes to {self.config.storage_bucket}/{key}")
        return await self.backend.upload(image.data, key, image.content_type)
