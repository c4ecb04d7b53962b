from abc import ABC, abstractmethod
from collections.abc import Callable

from qash.ocr.models import OcrResult

ProgressCallback = Callable[[int], None]


class BaseOcrEngine(ABC):
    """Contract for optical character recognition engines."""

    @abstractmethod
    def recognize(
        self,
        image_bytes: bytes,
        *,
        language: str,
        timeout_seconds: float | None = None,
        progress: ProgressCallback | None = None,
    ) -> OcrResult:
        """Recognise text in an image.

        Args:
            image_bytes: Encoded image (JPEG, PNG, GIF, BMP, TIFF or WEBP).
            language: Engine language model identifier, e.g. ``eng``.
            timeout_seconds: Upper bound for the recognition call.
            progress: Optional observer receiving percent-complete values.

        Returns:
            OcrResult with the raw text and reported confidence.

        Raises:
            OcrError: on any engine failure. No retry is attempted.
        """
