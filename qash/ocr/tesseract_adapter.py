import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from qash.ocr.base import BaseOcrEngine, ProgressCallback
from qash.ocr.exceptions import OcrError
from qash.ocr.models import OcrResult


class TesseractOcrAdapter(BaseOcrEngine):
    """Runs Tesseract through pytesseract on a Pillow image."""

    def __init__(self, tesseract_cmd: str = "") -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(
        self,
        image_bytes: bytes,
        *,
        language: str,
        timeout_seconds: float | None = None,
        progress: ProgressCallback | None = None,
    ) -> OcrResult:
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise OcrError("No time left for OCR")
        if progress is not None:
            progress(0)
        image = self._load_image(image_bytes)
        # pytesseract treats 0 as "no timeout"
        timeout = timeout_seconds or 0
        try:
            data = pytesseract.image_to_data(
                image,
                lang=language,
                timeout=timeout,
                output_type=pytesseract.Output.DICT,
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrError(f"Tesseract binary not available: {exc}") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            raise OcrError(str(exc)) from exc
        if progress is not None:
            progress(100)
        return OcrResult(text=self._layout_text(data), confidence=self._mean_confidence(data))

    @staticmethod
    def _layout_text(data: dict[str, list[object]]) -> str:
        """Rebuild page text from word boxes, one line per Tesseract line.

        Paragraphs are separated by a blank line.
        """
        line_words: dict[tuple[object, object, object], list[str]] = {}
        for index, raw in enumerate(data.get("text", [])):
            word = str(raw or "").strip()
            if word:
                key = (data["block_num"][index], data["par_num"][index], data["line_num"][index])
                line_words.setdefault(key, []).append(word)

        text_lines: list[str] = []
        previous = None
        for (block, paragraph, _), words in line_words.items():
            if previous is not None and (block, paragraph) != previous:
                text_lines.append("")
            text_lines.append(" ".join(words))
            previous = (block, paragraph)
        return "\n".join(text_lines)

    @staticmethod
    def _load_image(image_bytes: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.seek(0)
            image.load()
        except (UnidentifiedImageError, OSError, EOFError) as exc:
            raise OcrError(f"Unreadable image: {exc}") from exc
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        return image

    @staticmethod
    def _mean_confidence(data: dict[str, list[object]]) -> float:
        scores = []
        for raw in data.get("conf", []):
            try:
                score = float(raw)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                continue
            if score >= 0:
                scores.append(score)
        if not scores:
            return 0.0
        return sum(scores) / len(scores)
