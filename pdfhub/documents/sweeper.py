import time
from collections.abc import Callable
from datetime import datetime, timezone

from pdfhub.database.repositories.document_repository import DocumentRepository
from pdfhub.logging.logger import Log
from pdfhub.storage.base import BaseBlobStorage


class ExpirySweeper:
    """Poll loop: sweep expired documents -> sleep."""

    def __init__(
        self,
        doc_repo: DocumentRepository,
        storage: BaseBlobStorage,
        *,
        batch_size: int,
        interval_seconds: int,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._doc_repo = doc_repo
        self._storage = storage
        self._batch_size = batch_size
        self._interval_seconds = interval_seconds
        self._clock = clock

    def sweep_once(self) -> int:
        """Delete expired documents, batch by batch, and return how many went."""
        removed = 0
        while True:
            expired = self._doc_repo.find_expired(self._clock(), self._batch_size)
            if not expired:
                break
            batch_removed = 0
            for record in expired:
                try:
                    self._storage.delete(record.storage_key)
                except Exception as exc:
                    # keep the record so the blob is retried on the next sweep
                    Log.warning(f"Could not delete blob for document {record.id}: {exc}")
                    continue
                self._doc_repo.delete(record.id)
                batch_removed += 1
            removed += batch_removed
            if batch_removed == 0 or len(expired) < self._batch_size:
                break
        if removed:
            Log.info(f"Swept {removed} expired document(s)")
        return removed

    def run(self, max_sweeps: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_sweeps is set, stop after that many sweeps (for testing).
        """
        Log.info("Expiry sweeper started")
        sweeps = 0
        try:
            while True:
                self._try_sweep()
                sweeps += 1
                if max_sweeps is not None and sweeps >= max_sweeps:
                    break
                time.sleep(self._interval_seconds)
        except KeyboardInterrupt:
            Log.info("Expiry sweeper shutting down gracefully")

    def _try_sweep(self) -> None:
        """Run one sweep. Gracefully handle DB errors."""
        try:
            self.sweep_once()
        except Exception as exc:
            Log.warning(f"Expiry sweep failed, will retry: {exc}")
