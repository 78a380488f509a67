class StorageError(Exception):
    """Raised when the blob storage backend fails."""


class BlobNotFoundError(StorageError):
    """Raised when no object exists under the requested key."""


class UnsupportedStorageBackendError(StorageError):
    """Raised when settings name a storage backend that does not exist."""
