from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from pdfhub.pdf.exceptions import PdfInspectionError
from pdfhub.pdf.factory import PdfInspectorFactory
from pdfhub.pdf.models import build_metadata, parse_pdf_date
from pdfhub.pdf.pdfplumber_adapter import PdfPlumberInspector
from pdfhub.pdf.pymupdf_adapter import PyMuPdfInspector

INSPECTORS = [PdfPlumberInspector, PyMuPdfInspector]


@pytest.mark.parametrize("inspector_cls", INSPECTORS)
class TestInspectors:
    def test_counts_pages(self, inspector_cls: type, multi_page_pdf_bytes: bytes) -> None:
        assert inspector_cls().inspect(multi_page_pdf_bytes).page_count == 2

    def test_reads_title_and_author(self, inspector_cls: type, titled_pdf_bytes: bytes) -> None:
        info = inspector_cls().inspect(titled_pdf_bytes)
        assert info.metadata is not None
        assert info.metadata.title == "Quarterly report"
        assert info.metadata.author == "Finance team"
        assert info.metadata.creation_date is not None

    def test_raises_on_invalid_bytes(self, inspector_cls: type) -> None:
        with pytest.raises(PdfInspectionError):
            inspector_cls().inspect(b"not a pdf")


class TestParsePdfDate:
    def test_full_date_with_offset(self) -> None:
        parsed = parse_pdf_date("D:20240131120000+01'00'")
        assert parsed == datetime(2024, 1, 31, 12, 0, tzinfo=timezone(timedelta(hours=1)))

    def test_utc_marker(self) -> None:
        assert parse_pdf_date("D:20240131120000Z") == datetime(
            2024, 1, 31, 12, 0, tzinfo=timezone.utc
        )

    def test_year_only(self) -> None:
        assert parse_pdf_date("D:2024") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42, "D:20241399"])
    def test_unparseable_values_give_none(self, value: object) -> None:
        assert parse_pdf_date(value) is None


class TestBuildMetadata:
    def test_all_empty_gives_none(self) -> None:
        assert build_metadata(None, "", "  ", None, None, None) is None

    def test_bytes_are_decoded(self) -> None:
        metadata = build_metadata(b"Title", None, None, None, None, None)
        assert metadata is not None
        assert metadata.title == "Title"


def _make_settings(pdf_engine: str):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only pdf_engine."""
    with patch("pdfhub.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = pdf_engine
        return settings


class TestPdfInspectorFactory:
    def test_creates_pdfplumber_inspector(self) -> None:
        inspector = PdfInspectorFactory.create(_make_settings("pdfplumber"))
        assert isinstance(inspector, PdfPlumberInspector)

    def test_creates_pymupdf_inspector(self) -> None:
        inspector = PdfInspectorFactory.create(_make_settings("pymupdf"))
        assert isinstance(inspector, PyMuPdfInspector)

    def test_is_case_insensitive(self) -> None:
        inspector = PdfInspectorFactory.create(_make_settings("PdfPlumber"))
        assert isinstance(inspector, PdfPlumberInspector)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfInspectorFactory.create(_make_settings("unknown"))
