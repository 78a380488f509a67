from dataclasses import dataclass, field
from datetime import datetime

ROLE_USER = "user"
ROLE_ADMIN = "admin"

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


@dataclass
class Account:
    """Represents a row from the accounts table."""

    id: str
    full_name: str
    email: str
    password_hash: str
    role: str = ROLE_USER
    storage_limit_bytes: int | None = None
    last_login_at: datetime | None = None
    is_active: bool = True
    reset_token_hash: str | None = None
    reset_token_expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Account fields safe to return to callers (no credential material)."""
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "role": self.role,
            "storageLimit": self.storage_limit_bytes,
            "lastLogin": _iso(self.last_login_at),
            "isActive": self.is_active,
            "createdAt": _iso(self.created_at),
        }


@dataclass
class DocumentMetadata:
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creation_date: datetime | None = None
    modification_date: datetime | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "title": self.title,
            "author": self.author,
            "subject": self.subject,
            "keywords": self.keywords,
            "creationDate": _iso(self.creation_date),
            "modificationDate": _iso(self.modification_date),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> "DocumentMetadata | None":
        if not data:
            return None
        return cls(
            title=_str_or_none(data.get("title")),
            author=_str_or_none(data.get("author")),
            subject=_str_or_none(data.get("subject")),
            keywords=_str_or_none(data.get("keywords")),
            creation_date=_parse_iso(data.get("creationDate")),
            modification_date=_parse_iso(data.get("modificationDate")),
        )


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: str
    owner_id: str
    original_name: str
    stored_name: str
    storage_key: str
    size_bytes: int
    page_count: int
    mime_type: str = "application/pdf"
    status: str = STATUS_PENDING
    error_message: str | None = None
    metadata: DocumentMetadata | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    expires_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    def to_public_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user": self.owner_id,
            "originalName": self.original_name,
            "fileName": self.stored_name,
            "size": self.size_bytes,
            "mimeType": self.mime_type,
            "pageCount": self.page_count,
            "processingStatus": self.status,
            "processingError": self.error_message,
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "tags": list(self.tags),
            "createdAt": _iso(self.created_at),
            "expiresAt": _iso(self.expires_at),
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_iso(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _str_or_none(value: object) -> str | None:
    return str(value) if value not in (None, "") else None
