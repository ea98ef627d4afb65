"""
Object storage access for uploaded photos and receipts.

Uses MinIO (S3-compatible) for presigned URLs and object operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from functools import lru_cache
from io import BytesIO

from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import S3Error

from property_manager.config import settings
from property_manager.core.exceptions import StorageException
from property_manager.core.log_sanitizer import mask_storage_key
from property_manager.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PresignedUrl:
    """Time-limited URL for a single object"""

    url: str
    expires_at: datetime


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata of a stored object"""

    key: str
    size: int
    content_type: str | None


class StorageService(ABC):
    """Operations the application needs from the object store."""

    @abstractmethod
    def generate_presigned_upload_url(
        self, storage_key: str, content_type: str, file_size_bytes: int
    ) -> PresignedUrl:
        """Return a URL the client can PUT the object to directly."""

    @abstractmethod
    def generate_presigned_download_url(self, storage_key: str) -> str:
        """Return a URL the client can GET the object from."""

    @abstractmethod
    def stat_object(self, storage_key: str) -> ObjectInfo | None:
        """Return object metadata, or None if the object does not exist."""

    @abstractmethod
    def get_object(self, storage_key: str) -> bytes:
        """Download an object's content."""

    @abstractmethod
    def put_object(self, storage_key: str, data: bytes, content_type: str) -> None:
        """Upload an object."""

    @abstractmethod
    def delete_objects(self, storage_keys: list[str]) -> None:
        """
        Delete objects; keys that do not exist are ignored.

        Raises:
            StorageException: If any object could not be deleted
        """


class MinioStorageService(StorageService):
    """StorageService backed by a MinIO / S3 bucket."""

    def __init__(self, client: Minio, bucket: str, expiry_minutes: int):
        self.client = client
        self.bucket = bucket
        self.expiry = timedelta(minutes=expiry_minutes)

    def generate_presigned_upload_url(
        self, storage_key: str, content_type: str, file_size_bytes: int
    ) -> PresignedUrl:
        expires_at = datetime.now(UTC) + self.expiry
        try:
            url = self.client.presigned_put_object(self.bucket, storage_key, expires=self.expiry)
        except S3Error as e:
            logger.error(
                "presigned_upload_url_failed",
                storage_key=mask_storage_key(storage_key),
                error=str(e),
            )
            raise StorageException(f"Failed to generate upload URL: {e.code}") from e

        logger.info(
            "presigned_upload_url_generated",
            storage_key=mask_storage_key(storage_key),
            content_type=content_type,
            size_bytes=file_size_bytes,
            expires_at=expires_at.isoformat(),
        )
        return PresignedUrl(url=url, expires_at=expires_at)

    def generate_presigned_download_url(self, storage_key: str) -> str:
        try:
            return self.client.presigned_get_object(self.bucket, storage_key, expires=self.expiry)
        except S3Error as e:
            logger.error(
                "presigned_download_url_failed",
                storage_key=mask_storage_key(storage_key),
                error=str(e),
            )
            raise StorageException(f"Failed to generate download URL: {e.code}") from e

    def stat_object(self, storage_key: str) -> ObjectInfo | None:
        try:
            stat = self.client.stat_object(self.bucket, storage_key)
        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchObject"):
                return None
            raise StorageException(f"Failed to stat object: {e.code}") from e
        return ObjectInfo(key=storage_key, size=stat.size, content_type=stat.content_type)

    def get_object(self, storage_key: str) -> bytes:
        response = None
        try:
            response = self.client.get_object(self.bucket, storage_key)
            return response.read()
        except S3Error as e:
            raise StorageException(f"Failed to download object: {e.code}") from e
        finally:
            if response:
                response.close()
                response.release_conn()

    def put_object(self, storage_key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                self.bucket,
                storage_key,
                data=BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as e:
            raise StorageException(f"Failed to upload object: {e.code}") from e
        logger.info(
            "object_uploaded",
            storage_key=mask_storage_key(storage_key),
            size_bytes=len(data),
        )

    def delete_objects(self, storage_keys: list[str]) -> None:
        if not storage_keys:
            return
        try:
            errors = list(
                self.client.remove_objects(
                    self.bucket, [DeleteObject(key) for key in storage_keys]
                )
            )
        except S3Error as e:
            raise StorageException(f"Failed to delete objects: {e.code}") from e

        failed = [error.name for error in errors if error.code not in ("NoSuchKey", "NoSuchObject")]
        if failed:
            raise StorageException(f"Failed to delete {len(failed)} object(s)")

        logger.info(
            "objects_deleted",
            storage_keys=[mask_storage_key(key) for key in storage_keys],
        )


@lru_cache
def get_storage_service() -> StorageService:
    """
    FastAPI dependency returning the process-wide storage client.

    The MinIO client holds no per-request state, so it is built once.
    """
    client = Minio(
        settings.STORAGE_ENDPOINT,
        access_key=settings.STORAGE_ACCESS_KEY,
        secret_key=settings.STORAGE_SECRET_KEY,
        secure=settings.STORAGE_SECURE,
        region=settings.STORAGE_REGION,
    )
    logger.debug("minio_client_initialized", endpoint=settings.STORAGE_ENDPOINT)
    return MinioStorageService(
        client=client,
        bucket=settings.STORAGE_BUCKET,
        expiry_minutes=settings.PRESIGNED_URL_EXPIRY_MINUTES,
    )
