from pathlib import Path

from minio import Minio

from pdfhub.config.settings import Settings
from pdfhub.storage.base import BaseBlobStorage
from pdfhub.storage.exceptions import UnsupportedStorageBackendError
from pdfhub.storage.local_adapter import LocalBlobStorage
from pdfhub.storage.minio_adapter import MinioBlobStorage


class BlobStorageFactory:
    """Creates the blob storage adapter named by settings."""

    BACKENDS = ("local", "minio")

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStorage:
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalBlobStorage(files_root=Path(settings.files_root))
        if backend == "minio":
            client = Minio(
                settings.minio_endpoint,
                access_key=settings.minio_access_key,
                secret_key=settings.minio_secret_key,
                region=settings.minio_region,
                secure=settings.minio_secure,
            )
            return MinioBlobStorage(client, settings.minio_bucket)
        raise UnsupportedStorageBackendError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
