import io

from minio import Minio
from minio.error import S3Error

from pdfhub.storage.base import BaseBlobStorage
from pdfhub.storage.exceptions import BlobNotFoundError, StorageError


class MinioBlobStorage(BaseBlobStorage):
    """Stores blobs in an S3-compatible bucket through the MinIO client."""

    def __init__(self, client: Minio, bucket: str) -> None:
        self._client = client
        self._bucket = bucket
        self._bucket_checked = False

    def put(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        try:
            self._ensure_bucket()
            self._client.put_object(
                self._bucket,
                key,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as exc:
            raise StorageError(f"MinIO upload failed for {key}: {exc}") from exc
        return f"{self._bucket}/{key}"

    def get(self, key: str) -> bytes:
        response = None
        try:
            response = self._client.get_object(self._bucket, key)
            return response.read()
        except S3Error as exc:
            if exc.code in ("NoSuchKey", "NoSuchBucket"):
                raise BlobNotFoundError(f"Object not found: {self._bucket}/{key}") from exc
            raise StorageError(f"MinIO download failed for {key}: {exc}") from exc
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def delete(self, key: str) -> None:
        try:
            self._client.remove_object(self._bucket, key)
        except S3Error as exc:
            raise StorageError(f"MinIO delete failed for {key}: {exc}") from exc

    def _ensure_bucket(self) -> None:
        if self._bucket_checked:
            return
        if not self._client.bucket_exists(self._bucket):
            self._client.make_bucket(self._bucket)
        self._bucket_checked = True
