from datetime import datetime
from typing import Any

import psycopg
from psycopg.rows import dict_row

from pdfhub.database.connection import Database
from pdfhub.database.models import Account
from pdfhub.exceptions import DuplicateEmailError

_COLUMNS = """
    id, full_name, email, password_hash, role, storage_limit_bytes,
    last_login_at, is_active, reset_token_hash, reset_token_expires_at,
    created_at, updated_at
"""


class AccountRepository:
    """Database operations for the accounts table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def find_by_id(self, account_id: str) -> Account | None:
        return self._find_one(f"SELECT {_COLUMNS} FROM accounts WHERE id = %s", (account_id,))

    def find_by_email(self, email: str) -> Account | None:
        """Find by normalized (trimmed, lower-cased) email."""
        return self._find_one(f"SELECT {_COLUMNS} FROM accounts WHERE email = %s", (email,))

    def create(self, account: Account) -> Account:
        """Insert a new account.

        Raises:
            DuplicateEmailError: if the email is already taken.
        """
        try:
            with self._db.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO accounts (
                            id, full_name, email, password_hash, role,
                            storage_limit_bytes, last_login_at, is_active
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            account.id,
                            account.full_name,
                            account.email,
                            account.password_hash,
                            account.role,
                            account.storage_limit_bytes,
                            account.last_login_at,
                            account.is_active,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.errors.UniqueViolation as exc:
            raise DuplicateEmailError() from exc
        return _row_to_account(row)

    # Writes below touch only their own columns; never write back a whole row.

    def touch_last_login(self, account_id: str, at: datetime) -> None:
        self._execute(
            """
            UPDATE accounts
            SET last_login_at = %s, updated_at = NOW()
            WHERE id = %s
            """,
            (at, account_id),
        )

    def update_full_name(self, account_id: str, full_name: str) -> Account | None:
        """Set the display name and return the stored account, or None if it is gone."""
        return self._update_returning(
            "SET full_name = %s, updated_at = NOW() WHERE id = %s",
            (full_name, account_id),
        )

    def replace_password(self, account_id: str, current_hash: str, new_hash: str) -> bool:
        """Swap the password hash only if it still equals current_hash.

        Returns False when the password changed since current_hash was read.
        """
        rowcount = self._execute(
            """
            UPDATE accounts
            SET password_hash = %s, updated_at = NOW()
            WHERE id = %s AND password_hash = %s
            """,
            (new_hash, account_id, current_hash),
        )
        return rowcount == 1

    def set_reset_token(self, account_id: str, token_hash: str, expires_at: datetime) -> None:
        """Store a reset-token digest, replacing any earlier one."""
        self._execute(
            """
            UPDATE accounts
            SET reset_token_hash = %s, reset_token_expires_at = %s, updated_at = NOW()
            WHERE id = %s
            """,
            (token_hash, expires_at, account_id),
        )

    def consume_reset_token(self, token_hash: str, now: datetime, new_hash: str) -> str | None:
        """Set a new password and clear the reset token in one statement.

        Matches only an unexpired token; returns the account id, or None when no
        account holds it (unknown, expired, or already consumed).
        """
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE accounts
                    SET password_hash = %s,
                        reset_token_hash = NULL,
                        reset_token_expires_at = NULL,
                        updated_at = NOW()
                    WHERE reset_token_hash = %s
                      AND reset_token_expires_at > %s
                    RETURNING id
                    """,
                    (new_hash, token_hash, now),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            return None
        return str(row[0])

    def deactivate(self, account_id: str) -> Account | None:
        return self._update_returning(
            "SET is_active = FALSE, updated_at = NOW() WHERE id = %s",
            (account_id,),
        )

    def _execute(self, sql: str, params: tuple[Any, ...]) -> int:
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rowcount = cur.rowcount
            conn.commit()
        return rowcount

    def _update_returning(self, assignments: str, params: tuple[Any, ...]) -> Account | None:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(f"UPDATE accounts {assignments} RETURNING {_COLUMNS}", params)
                row = cur.fetchone()
            conn.commit()
        if row is None:
            return None
        return _row_to_account(row)

    def _find_one(self, sql: str, params: tuple[Any, ...]) -> Account | None:
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
        if row is None:
            return None
        return _row_to_account(row)


def _row_to_account(row: dict[str, Any]) -> Account:
    return Account(
        id=str(row["id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=row["role"],
        storage_limit_bytes=row["storage_limit_bytes"],
        last_login_at=row["last_login_at"],
        is_active=row["is_active"],
        reset_token_hash=row["reset_token_hash"],
        reset_token_expires_at=row["reset_token_expires_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
