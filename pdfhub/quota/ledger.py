from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from pdfhub.database.models import Account
from pdfhub.database.repositories.document_repository import DocumentRepository
from pdfhub.exceptions import QuotaExceededError
from pdfhub.logging.logger import Log


@dataclass(frozen=True)
class StorageSummary:
    used: int
    limit: int

    @property
    def available(self) -> int:
        return max(self.limit - self.used, 0)

    def to_dict(self) -> dict[str, int]:
        return {"used": self.used, "limit": self.limit, "available": self.available}


class QuotaLedger:
    """Per-account storage accounting over live document records.

    Usage is always summed from the record store, never cached, so it cannot
    drift from what is actually stored. Admission and persistence are not one
    transaction: concurrent requests may jointly overshoot the limit.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        default_limit_bytes: int,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._doc_repo = doc_repo
        self._default_limit = default_limit_bytes
        self._clock = clock

    def current_usage(self, account_id: str) -> int:
        return self._doc_repo.sum_active_size(account_id, self._clock())

    def limit_for(self, account: Account) -> int:
        if account.storage_limit_bytes is None:
            return self._default_limit
        return account.storage_limit_bytes

    def admit(self, account: Account, incoming_bytes: int) -> None:
        """Allow an operation that will store `incoming_bytes` more.

        Raises:
            QuotaExceededError: if usage + incoming would exceed the limit.
        """
        if incoming_bytes < 0:
            raise ValueError("incoming_bytes must be non-negative")
        usage = self.current_usage(account.id)
        limit = self.limit_for(account)
        if usage + incoming_bytes > limit:
            Log.warning(
                f"Quota exceeded for account {account.id}: "
                f"{usage} used + {incoming_bytes} incoming > {limit}"
            )
            raise QuotaExceededError()

    def summary(self, account: Account) -> StorageSummary:
        return StorageSummary(used=self.current_usage(account.id), limit=self.limit_for(account))
