from pdfhub.database.connection import Database
from pdfhub.logging.logger import Log

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id UUID PRIMARY KEY,
        full_name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
        storage_limit_bytes BIGINT,
        last_login_at TIMESTAMPTZ,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        reset_token_hash TEXT,
        reset_token_expires_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS documents (
        id UUID PRIMARY KEY,
        owner_id UUID NOT NULL REFERENCES accounts (id),
        original_name TEXT NOT NULL,
        stored_name TEXT NOT NULL,
        storage_key TEXT NOT NULL,
        size_bytes BIGINT NOT NULL,
        mime_type TEXT NOT NULL DEFAULT 'application/pdf',
        page_count INTEGER NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending'
            CHECK (status IN ('pending', 'processing', 'completed', 'failed')),
        error_message TEXT,
        metadata JSONB,
        tags TEXT[] NOT NULL DEFAULT '{}',
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        expires_at TIMESTAMPTZ NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS documents_owner_created_idx "
    "ON documents (owner_id, created_at DESC)",
    "CREATE INDEX IF NOT EXISTS documents_status_idx ON documents (status)",
    "CREATE INDEX IF NOT EXISTS documents_expires_at_idx ON documents (expires_at)",
)


def create_schema(db: Database) -> None:
    """Create tables and indexes if they do not exist yet."""
    with db.connection() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.execute(statement)
        conn.commit()
    Log.info("Database schema created/checked")
