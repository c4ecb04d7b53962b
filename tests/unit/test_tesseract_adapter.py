from unittest.mock import MagicMock, patch

import pytesseract
import pytest

from qash.ocr.exceptions import OcrError
from qash.ocr.tesseract_adapter import TesseractOcrAdapter

MODULE = "qash.ocr.tesseract_adapter.pytesseract"


def _word_boxes(*words: tuple[int, int, int, str, object]) -> dict[str, list[object]]:
    """Build an image_to_data DICT from (block, paragraph, line, text, conf) tuples."""
    return {
        "block_num": [w[0] for w in words],
        "par_num": [w[1] for w in words],
        "line_num": [w[2] for w in words],
        "text": [w[3] for w in words],
        "conf": [w[4] for w in words],
    }


class TestTesseractOcrAdapter:
    def test_returns_text_and_mean_confidence(self, sample_png_bytes: bytes) -> None:
        data = _word_boxes((1, 1, 1, "Total", "90"), (1, 1, 1, "", "-1"), (1, 1, 1, "300", 70), (1, 1, 2, "", "x"))
        with patch(f"{MODULE}.image_to_data", return_value=data):
            result = TesseractOcrAdapter().recognize(sample_png_bytes, language="eng", timeout_seconds=12)
        assert result.text == "Total 300"
        assert result.confidence == pytest.approx(80.0)

    def test_rebuilds_lines_and_paragraphs(self, sample_png_bytes: bytes) -> None:
        data = _word_boxes(
            (1, 1, 1, "Invoice", 95),
            (1, 1, 1, "42", 95),
            (1, 1, 2, "Due", 95),
            (2, 1, 1, "Total", 95),
            (2, 1, 1, "300", 95),
        )
        with patch(f"{MODULE}.image_to_data", return_value=data):
            result = TesseractOcrAdapter().recognize(sample_png_bytes, language="eng")
        assert result.text == "Invoice 42\nDue\n\nTotal 300"

    def test_single_tesseract_run_gets_whole_budget(self, sample_png_bytes: bytes) -> None:
        with patch(f"{MODULE}.image_to_data", return_value=_word_boxes()) as to_data, patch(
            f"{MODULE}.image_to_string"
        ) as to_string:
            TesseractOcrAdapter().recognize(sample_png_bytes, language="deu", timeout_seconds=10)
        to_string.assert_not_called()
        to_data.assert_called_once()
        _, kwargs = to_data.call_args
        assert kwargs["timeout"] == 10
        assert kwargs["lang"] == "deu"

    def test_reports_progress(self, sample_png_bytes: bytes) -> None:
        progress = MagicMock()
        with patch(f"{MODULE}.image_to_data", return_value=_word_boxes((1, 1, 1, "a", -1))):
            result = TesseractOcrAdapter().recognize(sample_png_bytes, language="eng", progress=progress)
        assert [call.args[0] for call in progress.call_args_list] == [0, 100]
        assert result.confidence == 0.0

    def test_exhausted_budget_fails_before_running(self, sample_png_bytes: bytes) -> None:
        with patch(f"{MODULE}.image_to_data") as to_data:
            with pytest.raises(OcrError, match="No time left"):
                TesseractOcrAdapter().recognize(sample_png_bytes, language="eng", timeout_seconds=0)
        to_data.assert_not_called()

    def test_missing_binary(self, sample_png_bytes: bytes) -> None:
        with patch(f"{MODULE}.image_to_data", side_effect=pytesseract.TesseractNotFoundError()):
            with pytest.raises(OcrError, match="Tesseract binary not available"):
                TesseractOcrAdapter().recognize(sample_png_bytes, language="eng")

    def test_timeout_is_ocr_error(self, sample_png_bytes: bytes) -> None:
        with patch(f"{MODULE}.image_to_data", side_effect=RuntimeError("Tesseract process timeout")):
            with pytest.raises(OcrError, match="timeout"):
                TesseractOcrAdapter().recognize(sample_png_bytes, language="eng", timeout_seconds=1)

    def test_unreadable_image(self) -> None:
        with pytest.raises(OcrError, match="Unreadable image"):
            TesseractOcrAdapter().recognize(b"not an image", language="eng")
