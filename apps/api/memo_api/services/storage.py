"""Object storage service for recorded audio."""

import io
from datetime import timedelta

from minio import Minio
from minio.error import S3Error

from memo_api.core.config import settings
from memo_api.core.errors import StorageError
from memo_api.core.observability import trace_function


def build_minio_client() -> Minio:
    """Create a MinIO/S3 client from settings."""
    return Minio(
        settings.S3_ENDPOINT.replace("http://", "").replace("https://", ""),
        access_key=settings.S3_ACCESS_KEY,
        secret_key=settings.S3_SECRET_KEY,
        region=settings.S3_REGION,
        secure=settings.S3_ENDPOINT.startswith("https://"),
    )


class StorageService:
    """Stores audio buffers in a single bucket and hands out signed URLs."""

    def __init__(
        self,
        client: Minio | None = None,
        bucket: str | None = None,
        default_expires_in: int | None = None,
    ) -> None:
        self.client = client or build_minio_client()
        self.bucket = bucket or settings.S3_BUCKET
        self.default_expires_in = default_expires_in or settings.STORAGE_URL_EXPIRES_SECONDS

    def ensure_bucket(self) -> None:
        """Ensure the S3 bucket exists."""
        try:
            if not self.client.bucket_exists(bucket_name=self.bucket):
                self.client.make_bucket(bucket_name=self.bucket)
        except S3Error as e:
            raise StorageError(f"Failed to create bucket: {e}") from e

    @trace_function("storage_service.upload_buffer")
    def upload_buffer(self, path: str, data: bytes, content_type: str) -> str:
        """Upload bytes to ``path`` and return the object name."""
        try:
            self.client.put_object(
                bucket_name=self.bucket,
                object_name=path,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as e:
            raise StorageError(f"Failed to upload file: {e}") from e
        return path

    @trace_function("storage_service.generate_presigned_url")
    def generate_presigned_url(self, path: str, expires_in: int | None = None) -> str:
        """Get presigned URL for download."""
        try:
            return self.client.presigned_get_object(
                bucket_name=self.bucket,
                object_name=path,
                expires=timedelta(seconds=expires_in or self.default_expires_in),
            )
        except S3Error as e:
            raise StorageError(f"Failed to generate download URL: {e}") from e

    @trace_function("storage_service.delete_object")
    def delete_object(self, path: str) -> None:
        """Remove a stored object."""
        try:
            self.client.remove_object(bucket_name=self.bucket, object_name=path)
        except S3Error as e:
            raise StorageError(f"Failed to delete file: {e}") from e
