from qash.classification.formats import ExtractorKind
from qash.config.settings import Settings
from qash.extraction.base import BaseExtractor
from qash.extraction.csv_extractor import CsvExtractor
from qash.extraction.image_extractor import ImageExtractor
from qash.extraction.spreadsheet_extractor import SpreadsheetExtractor
from qash.extraction.text_extractor import PlainTextExtractor
from qash.extraction.word_extractor import WordExtractor
from qash.ocr.base import BaseOcrEngine
from qash.ocr.tesseract_adapter import TesseractOcrAdapter
from qash.pdf.factory import PdfExtractorFactory


class ExtractorRegistry:
    """Lookup from extractor family to the extractor instance serving it."""

    def __init__(self, extractors: dict[ExtractorKind, BaseExtractor]) -> None:
        missing = set(ExtractorKind) - set(extractors)
        if missing:
            names = sorted(kind.value for kind in missing)
            raise ValueError(f"No extractor registered for: {names}")
        self._extractors = dict(extractors)

    def get(self, kind: ExtractorKind) -> BaseExtractor:
        return self._extractors[kind]


class ExtractorFactory:
    """Builds the extractor registry from application settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        ocr_engine: BaseOcrEngine | None = None,
    ) -> ExtractorRegistry:
        engine = ocr_engine or TesseractOcrAdapter(settings.tesseract_cmd)
        return ExtractorRegistry({
            ExtractorKind.PDF: PdfExtractorFactory.create(settings),
            ExtractorKind.WORD: WordExtractor(),
            ExtractorKind.SPREADSHEET: SpreadsheetExtractor(),
            ExtractorKind.CSV: CsvExtractor(),
            ExtractorKind.TEXT: PlainTextExtractor(),
            ExtractorKind.IMAGE: ImageExtractor(engine, language=settings.ocr_language),
        })
