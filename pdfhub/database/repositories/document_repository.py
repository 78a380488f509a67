from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from pdfhub.database.connection import Database
from pdfhub.database.models import STATUS_FAILED, DocumentMetadata, DocumentRecord
from pdfhub.exceptions import NotFoundError

_COLUMNS = """
    id, owner_id, original_name, stored_name, storage_key, size_bytes,
    mime_type, page_count, status, error_message, metadata, tags,
    created_at, expires_at
"""


class DocumentRepository:
    """Database operations for the documents table."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, record: DocumentRecord) -> DocumentRecord:
        """Insert a record and return it as stored (with server timestamps)."""
        metadata = Jsonb(record.metadata.to_dict()) if record.metadata else None
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents (
                        id, owner_id, original_name, stored_name, storage_key,
                        size_bytes, mime_type, page_count, status, error_message,
                        metadata, tags, created_at, expires_at
                    )
                    VALUES (
                        %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                        COALESCE(%s, NOW()), %s
                    )
                    RETURNING {_COLUMNS}
                    """,
                    (
                        record.id,
                        record.owner_id,
                        record.original_name,
                        record.stored_name,
                        record.storage_key,
                        record.size_bytes,
                        record.mime_type,
                        record.page_count,
                        record.status,
                        record.error_message,
                        metadata,
                        list(record.tags),
                        record.created_at,
                        record.expires_at,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        return _row_to_record(row)

    def update_status(
        self,
        document_id: str,
        status: str,
        error_message: str | None = None,
    ) -> None:
        """Move a record to a new processing status.

        Raises:
            NotFoundError: if no document with this ID exists.
        """
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = %s, error_message = %s
                    WHERE id = %s
                    """,
                    (status, error_message, document_id),
                )
                if cur.rowcount == 0:
                    raise NotFoundError(f"Document {document_id} not found")
            conn.commit()

    def find_owned(self, document_id: str, owner_id: str) -> DocumentRecord | None:
        """Find a document only if it belongs to the given owner."""
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s AND owner_id = %s",
                    (document_id, owner_id),
                )
                row = cur.fetchone()
        if row is None:
            return None
        return _row_to_record(row)

    def list_by_owner(self, owner_id: str, now: datetime) -> list[DocumentRecord]:
        """Non-expired documents of an owner, newest first."""
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM documents
                    WHERE owner_id = %s AND expires_at > %s
                    ORDER BY created_at DESC
                    """,
                    (owner_id, now),
                )
                rows = cur.fetchall()
        return [_row_to_record(row) for row in rows]

    def sum_active_size(self, owner_id: str, now: datetime) -> int:
        """Total bytes of an owner's non-expired documents that did not fail."""
        with self._db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT COALESCE(SUM(size_bytes), 0)
                    FROM documents
                    WHERE owner_id = %s
                      AND expires_at > %s
                      AND status <> %s
                    """,
                    (owner_id, now, STATUS_FAILED),
                )
                row = cur.fetchone()
        return int(row[0]) if row is not None else 0

    def find_expired(self, now: datetime, limit: int) -> list[DocumentRecord]:
        """Oldest-expired first, at most `limit` rows."""
        with self._db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM documents
                    WHERE expires_at < %s
                    ORDER BY expires_at
                    LIMIT %s
                    """,
                    (now, limit),
                )
                rows = cur.fetchall()
        return [_row_to_record(row) for row in rows]

    def delete(self, document_id: str) -> None:
        with self._db.connection() as conn:
            conn.execute("DELETE FROM documents WHERE id = %s", (document_id,))
            conn.commit()


def _row_to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        original_name=row["original_name"],
        stored_name=row["stored_name"],
        storage_key=row["storage_key"],
        size_bytes=row["size_bytes"],
        mime_type=row["mime_type"],
        page_count=row["page_count"],
        status=row["status"],
        error_message=row["error_message"],
        metadata=DocumentMetadata.from_dict(row["metadata"]),
        tags=list(row["tags"] or []),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )
