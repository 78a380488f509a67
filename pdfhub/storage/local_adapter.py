from pathlib import Path

from pdfhub.storage.base import BaseBlobStorage
from pdfhub.storage.exceptions import BlobNotFoundError, StorageError


class LocalBlobStorage(BaseBlobStorage):
    """Stores blobs as files below a root directory."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def put(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        _ = content_type
        path = self._resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc
        return str(path)

    def get(self, key: str) -> bytes:
        path = self._resolve_path(key)
        if not path.exists():
            raise BlobNotFoundError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._resolve_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete {path}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        path = (self._files_root / key).resolve()
        if not path.is_relative_to(self._files_root.resolve()):
            raise StorageError(f"Key escapes storage root: {key}")
        return path
