import uuid
from datetime import datetime, timedelta, timezone

import pytest

from pdfhub.database.models import Account, DocumentMetadata, DocumentRecord
from pdfhub.database.repositories.document_repository import DocumentRepository
from pdfhub.exceptions import NotFoundError
from tests.fakes import make_record


def _make_document(
    owner_id: str,
    size_bytes: int = 1024,
    status: str = "completed",
    created_at: datetime | None = None,
    expires_at: datetime | None = None,
) -> DocumentRecord:
    return make_record(
        owner_id,
        str(uuid.uuid4()),
        size_bytes=size_bytes,
        status=status,
        created_at=created_at or datetime.now(timezone.utc),
        expires_at=expires_at,
    )


@pytest.mark.integration
class TestDocumentRepository:
    def test_create_round_trips_metadata_and_tags(
        self, document_repo: DocumentRepository, seed_account: Account
    ) -> None:
        record = _make_document(seed_account.id)
        record.metadata = DocumentMetadata(
            title="Report", creation_date=datetime(2024, 1, 1, tzinfo=timezone.utc)
        )

        document_repo.create(record)
        stored = document_repo.find_owned(record.id, seed_account.id)

        assert stored is not None
        assert stored.metadata == record.metadata
        assert stored.tags == ["upload"]

    def test_find_owned_hides_other_owners(
        self, document_repo: DocumentRepository, seed_account: Account
    ) -> None:
        record = document_repo.create(_make_document(seed_account.id))
        assert document_repo.find_owned(record.id, "00000000-0000-0000-0000-000000000000") is None

    def test_update_status(self, document_repo: DocumentRepository, seed_account: Account) -> None:
        record = document_repo.create(_make_document(seed_account.id, status="pending"))

        document_repo.update_status(record.id, "failed", "disk full")

        stored = document_repo.find_owned(record.id, seed_account.id)
        assert stored is not None
        assert stored.status == "failed"
        assert stored.error_message == "disk full"

    def test_update_status_of_missing_document_raises(
        self, document_repo: DocumentRepository
    ) -> None:
        with pytest.raises(NotFoundError):
            document_repo.update_status("00000000-0000-0000-0000-000000000000", "completed")

    def test_list_and_usage_skip_expired_and_failed(
        self, document_repo: DocumentRepository, seed_account: Account
    ) -> None:
        now = datetime.now(timezone.utc)
        older = document_repo.create(
            _make_document(seed_account.id, size_bytes=100, created_at=now - timedelta(hours=2))
        )
        newer = document_repo.create(
            _make_document(seed_account.id, size_bytes=200, created_at=now - timedelta(hours=1))
        )
        document_repo.create(_make_document(seed_account.id, size_bytes=400, status="failed"))
        expired = document_repo.create(
            _make_document(
                seed_account.id,
                size_bytes=800,
                created_at=now - timedelta(days=8),
                expires_at=now - timedelta(days=1),
            )
        )

        listed = [r.id for r in document_repo.list_by_owner(seed_account.id, now)]

        assert listed[:2] == [newer.id, older.id]
        assert expired.id not in listed
        assert document_repo.sum_active_size(seed_account.id, now) == 300
        assert expired.id in [r.id for r in document_repo.find_expired(now, 1000)]

    def test_delete(self, document_repo: DocumentRepository, seed_account: Account) -> None:
        record = document_repo.create(_make_document(seed_account.id))
        document_repo.delete(record.id)
        assert document_repo.find_owned(record.id, seed_account.id) is None
