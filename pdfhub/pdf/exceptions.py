from pdfhub.exceptions import ProcessingError


class PdfInspectionError(ProcessingError):
    """Raised when a PDF cannot be opened to read its page count or metadata."""
