from qash.config.settings import Settings
from qash.extraction.base import BaseExtractor
from qash.pdf.pdfplumber_adapter import PdfPlumberAdapter
from qash.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Picks the PDF engine named by ``settings.pdf_engine``."""

    ADAPTERS: dict[str, type[BaseExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
