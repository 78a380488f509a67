import os
import uuid
from collections.abc import Generator

import pytest

from pdfhub.config.settings import Settings
from pdfhub.database.connection import Database
from pdfhub.database.models import Account
from pdfhub.database.repositories.account_repository import AccountRepository
from pdfhub.database.repositories.document_repository import DocumentRepository
from pdfhub.database.schema import create_schema


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "pdfhub_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def database(test_settings: Settings) -> Generator[Database, None, None]:
    try:
        db = Database.from_settings(test_settings)
        create_schema(db)
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def integration_cleanup(database: Database) -> Generator[list[str], None, None]:
    """Account ids to delete (with their documents) after the test."""
    account_ids: list[str] = []
    yield account_ids
    if not account_ids:
        return
    with database.connection() as conn:
        for account_id in account_ids:
            conn.execute("DELETE FROM documents WHERE owner_id = %s", (account_id,))
            conn.execute("DELETE FROM accounts WHERE id = %s", (account_id,))
        conn.commit()


@pytest.fixture
def account_repo(database: Database) -> AccountRepository:
    return AccountRepository(database)


@pytest.fixture
def document_repo(database: Database) -> DocumentRepository:
    return DocumentRepository(database)


@pytest.fixture
def seed_account(account_repo: AccountRepository, integration_cleanup: list[str]) -> Account:
    account_id = str(uuid.uuid4())
    integration_cleanup.append(account_id)
    return account_repo.create(
        Account(
            id=account_id,
            full_name="Integration User",
            email=f"{account_id}@example.com",
            password_hash="scrypt:placeholder",
        )
    )

