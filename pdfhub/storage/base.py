from abc import ABC, abstractmethod


def document_storage_key(owner_id: str, document_id: str, filename: str) -> str:
    """Build object key for a stored document: pdfs/{owner_id}/{document_id}-{filename}"""
    return f"pdfs/{owner_id}/{document_id}-{filename}"


class BaseBlobStorage(ABC):
    """Contract for all blob storage adapters."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        """Store bytes under a key and return a location reference.

        Raises:
            StorageError: if the object cannot be written.
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Read the bytes stored under a key.

        Raises:
            BlobNotFoundError: if nothing is stored under the key.
            StorageError: on any other failure.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object stored under a key. Missing keys are ignored.

        Raises:
            StorageError: if the object exists but cannot be removed.
        """
