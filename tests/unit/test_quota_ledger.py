from datetime import timedelta

import pytest

from pdfhub.config.settings import MIB
from pdfhub.exceptions import QuotaExceededError
from pdfhub.quota.ledger import QuotaLedger, StorageSummary
from tests.fakes import FakeClock, InMemoryDocumentRepository, make_account, make_record

LIMIT = 100 * MIB


def _make_ledger() -> tuple[QuotaLedger, InMemoryDocumentRepository, FakeClock]:
    repo = InMemoryDocumentRepository()
    clock = FakeClock()
    return QuotaLedger(repo, LIMIT, clock=clock), repo, clock


class TestAdmit:
    def test_admits_up_to_the_limit(self) -> None:
        ledger, repo, _clock = _make_ledger()
        account = make_account()
        repo.create(make_record(account.id, "a", size_bytes=90 * MIB))

        ledger.admit(account, 10 * MIB)

    def test_rejects_one_byte_over_the_limit(self) -> None:
        ledger, repo, _clock = _make_ledger()
        account = make_account()
        repo.create(make_record(account.id, "a", size_bytes=90 * MIB))

        with pytest.raises(QuotaExceededError, match="Storage limit reached"):
            ledger.admit(account, 10 * MIB + 1)

    def test_rejects_95_plus_10_mib(self) -> None:
        ledger, repo, _clock = _make_ledger()
        account = make_account()
        repo.create(make_record(account.id, "a", size_bytes=95 * MIB))
        with pytest.raises(QuotaExceededError):
            ledger.admit(account, 10 * MIB)

    def test_account_limit_overrides_default(self) -> None:
        ledger, _repo, _clock = _make_ledger()
        account = make_account(storage_limit_bytes=MIB)
        with pytest.raises(QuotaExceededError):
            ledger.admit(account, MIB + 1)

    def test_negative_incoming_is_a_programming_error(self) -> None:
        ledger, _repo, _clock = _make_ledger()
        with pytest.raises(ValueError):
            ledger.admit(make_account(), -1)


class TestCurrentUsage:
    def test_counts_only_the_accounts_own_documents(self) -> None:
        ledger, repo, _clock = _make_ledger()
        repo.create(make_record("owner-a", "a", size_bytes=10))
        repo.create(make_record("owner-b", "b", size_bytes=99))
        assert ledger.current_usage("owner-a") == 10

    def test_ignores_failed_documents(self) -> None:
        ledger, repo, _clock = _make_ledger()
        repo.create(make_record("owner-a", "a", size_bytes=10))
        repo.create(make_record("owner-a", "b", size_bytes=50, status="failed"))
        assert ledger.current_usage("owner-a") == 10

    def test_expired_documents_stop_counting(self) -> None:
        ledger, repo, clock = _make_ledger()
        repo.create(make_record("owner-a", "a", size_bytes=10))

        clock.advance(timedelta(days=8))

        assert ledger.current_usage("owner-a") == 0


class TestSummary:
    def test_reports_used_limit_and_available(self) -> None:
        ledger, repo, _clock = _make_ledger()
        account = make_account()
        repo.create(make_record(account.id, "a", size_bytes=40 * MIB))

        summary = ledger.summary(account)

        assert summary == StorageSummary(used=40 * MIB, limit=LIMIT)
        assert summary.to_dict() == {"used": 40 * MIB, "limit": LIMIT, "available": 60 * MIB}

    def test_available_never_goes_negative(self) -> None:
        assert StorageSummary(used=120, limit=100).available == 0
