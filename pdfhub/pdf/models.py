import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from pdfhub.database.models import DocumentMetadata

# D:YYYYMMDDHHmmSSOHH'mm' with every part after the year optional
_PDF_DATE = re.compile(
    r"^D?:?(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?"
    r"(?:([Zz+\-])(\d{2})?'?(\d{2})?'?)?"
)


@dataclass(frozen=True)
class PdfInfo:
    """Structural facts about a PDF needed to describe it in a record."""

    page_count: int
    metadata: DocumentMetadata | None = None


def parse_pdf_date(value: object) -> datetime | None:
    """Parse a PDF date string (e.g. "D:20240131120000+01'00'")."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    match = _PDF_DATE.match(value.strip())
    if match is None:
        return None
    year, month, day, hour, minute, second, sign, tz_h, tz_m = match.groups()
    tz = timezone.utc
    if sign in ("+", "-"):
        offset = timedelta(hours=int(tz_h or 0), minutes=int(tz_m or 0))
        tz = timezone(offset if sign == "+" else -offset)
    try:
        return datetime(
            int(year),
            int(month or 1),
            int(day or 1),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            tzinfo=tz,
        )
    except ValueError:
        return None


def build_metadata(
    title: object,
    author: object,
    subject: object,
    keywords: object,
    creation_date: object,
    modification_date: object,
) -> DocumentMetadata | None:
    """Build DocumentMetadata from raw info-dict values; None when all are empty."""
    metadata = DocumentMetadata(
        title=_clean(title),
        author=_clean(author),
        subject=_clean(subject),
        keywords=_clean(keywords),
        creation_date=parse_pdf_date(creation_date),
        modification_date=parse_pdf_date(modification_date),
    )
    if metadata == DocumentMetadata():
        return None
    return metadata


def _clean(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip()
    return text or None
