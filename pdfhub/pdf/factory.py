from pdfhub.config.settings import Settings
from pdfhub.pdf.base import BasePdfInspector
from pdfhub.pdf.pdfplumber_adapter import PdfPlumberInspector
from pdfhub.pdf.pymupdf_adapter import PyMuPdfInspector


class PdfInspectorFactory:
    """Creates the correct PDF inspector based on settings."""

    ADAPTERS: dict[str, type[BasePdfInspector]] = {
        "pdfplumber": PdfPlumberInspector,
        "pymupdf": PyMuPdfInspector,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfInspector:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
