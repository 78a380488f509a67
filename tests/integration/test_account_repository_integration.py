from datetime import datetime, timedelta, timezone

import pytest

from pdfhub.database.models import Account
from pdfhub.database.repositories.account_repository import AccountRepository
from pdfhub.exceptions import DuplicateEmailError


@pytest.mark.integration
class TestAccountRepository:
    def test_create_sets_server_defaults(self, seed_account: Account) -> None:
        assert seed_account.created_at is not None
        assert seed_account.is_active is True
        assert seed_account.role == "user"

    def test_find_by_email_and_id(
        self, account_repo: AccountRepository, seed_account: Account
    ) -> None:
        by_email = account_repo.find_by_email(seed_account.email)
        by_id = account_repo.find_by_id(seed_account.id)
        assert by_email is not None and by_email.id == seed_account.id
        assert by_id is not None and by_id.email == seed_account.email

    def test_duplicate_email_is_rejected(
        self, account_repo: AccountRepository, seed_account: Account
    ) -> None:
        with pytest.raises(DuplicateEmailError):
            account_repo.create(
                Account(
                    id="00000000-0000-0000-0000-00000000dead",
                    full_name="Copy",
                    email=seed_account.email,
                    password_hash="x",
                )
            )

    def test_reset_token_is_consumed_once(
        self, account_repo: AccountRepository, seed_account: Account
    ) -> None:
        now = datetime.now(timezone.utc)
        digest = "digest-" + seed_account.id
        account_repo.set_reset_token(seed_account.id, digest, now + timedelta(minutes=10))

        first = account_repo.consume_reset_token(digest, now, "scrypt:first")
        second = account_repo.consume_reset_token(digest, now, "scrypt:second")

        stored = account_repo.find_by_id(seed_account.id)
        assert first == seed_account.id
        assert second is None
        assert stored is not None
        assert stored.password_hash == "scrypt:first"
        assert stored.reset_token_hash is None

    def test_expired_reset_token_is_not_consumed(
        self, account_repo: AccountRepository, seed_account: Account
    ) -> None:
        now = datetime.now(timezone.utc)
        digest = "digest-" + seed_account.id
        account_repo.set_reset_token(seed_account.id, digest, now + timedelta(minutes=10))

        assert account_repo.consume_reset_token(digest, now + timedelta(minutes=11), "x") is None

    def test_name_update_does_not_touch_password_or_active_flag(
        self, account_repo: AccountRepository, seed_account: Account
    ) -> None:
        account_repo.deactivate(seed_account.id)
        account_repo.replace_password(seed_account.id, seed_account.password_hash, "scrypt:new")

        updated = account_repo.update_full_name(seed_account.id, "Renamed User")
        account_repo.touch_last_login(seed_account.id, datetime.now(timezone.utc))

        stored = account_repo.find_by_id(seed_account.id)
        assert updated is not None and updated.full_name == "Renamed User"
        assert stored is not None
        assert stored.is_active is False
        assert stored.password_hash == "scrypt:new"
        assert stored.last_login_at is not None

    def test_replace_password_refuses_stale_hash(
        self, account_repo: AccountRepository, seed_account: Account
    ) -> None:
        assert account_repo.replace_password(seed_account.id, "scrypt:stale", "scrypt:new") is False
