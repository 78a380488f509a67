import pymupdf

from pdfhub.pdf.base import BasePdfInspector
from pdfhub.pdf.exceptions import PdfInspectionError
from pdfhub.pdf.models import PdfInfo, build_metadata


class PyMuPdfInspector(BasePdfInspector):
    """Inspects PDFs using PyMuPDF."""

    def inspect(self, pdf_bytes: bytes) -> PdfInfo:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                page_count = doc.page_count
                info = doc.metadata or {}
        except Exception as exc:
            raise PdfInspectionError(f"pymupdf could not open document: {exc}") from exc
        return PdfInfo(
            page_count=page_count,
            metadata=build_metadata(
                info.get("title"),
                info.get("author"),
                info.get("subject"),
                info.get("keywords"),
                info.get("creationDate"),
                info.get("modDate"),
            ),
        )
