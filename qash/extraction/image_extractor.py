from qash.extraction.base import BaseExtractor
from qash.extraction.exceptions import ExtractionError, NoTextFoundError
from qash.logging.logger import Log
from qash.ocr.base import BaseOcrEngine
from qash.ocr.exceptions import OcrError
from qash.processor.cancellation import CancellationToken


class ImageExtractor(BaseExtractor):
    """Extracts text from images through an OCR engine."""

    def __init__(self, engine: BaseOcrEngine, language: str = "eng") -> None:
        self._engine = engine
        self._language = language

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        Log.info("Processing image with OCR", file_name=file_name, size=len(content))
        timeout = token.remaining_seconds() if token is not None else None
        try:
            result = self._engine.recognize(
                content,
                language=self._language,
                timeout_seconds=timeout,
                progress=lambda percent: Log.debug(
                    f"OCR progress: {percent}%", file_name=file_name
                ),
            )
        except OcrError as exc:
            raise ExtractionError(file_name, f"OCR processing failed: {exc}") from exc

        Log.info(
            "OCR result",
            file_name=file_name,
            confidence=result.confidence,
            text_length=len(result.text),
            preview=Log.preview(result.text),
        )
        if not result.text.strip():
            raise NoTextFoundError(file_name)
        return result.text
