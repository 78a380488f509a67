from abc import ABC, abstractmethod

from pdfhub.pdf.models import PdfInfo


class BasePdfInspector(ABC):
    """Contract for all PDF inspection adapters."""

    @abstractmethod
    def inspect(self, pdf_bytes: bytes) -> PdfInfo:
        """Read page count and document metadata from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfInfo with the page count and metadata (None when absent).

        Raises:
            PdfInspectionError: if the bytes cannot be opened as a PDF.
        """
