class OcrError(Exception):
    """Raised when the OCR engine cannot process an image."""
