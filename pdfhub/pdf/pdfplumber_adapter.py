import io

import pdfplumber

from pdfhub.pdf.base import BasePdfInspector
from pdfhub.pdf.exceptions import PdfInspectionError
from pdfhub.pdf.models import PdfInfo, build_metadata


class PdfPlumberInspector(BasePdfInspector):
    """Inspects PDFs using pdfplumber."""

    def inspect(self, pdf_bytes: bytes) -> PdfInfo:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                page_count = len(pdf.pages)
                info = pdf.metadata or {}
        except Exception as exc:
            raise PdfInspectionError(f"pdfplumber could not open document: {exc}") from exc
        return PdfInfo(
            page_count=page_count,
            metadata=build_metadata(
                info.get("Title"),
                info.get("Author"),
                info.get("Subject"),
                info.get("Keywords"),
                info.get("CreationDate"),
                info.get("ModDate"),
            ),
        )
