class ExtractionError(Exception):
    """Raised when text cannot be extracted from an uploaded file.

    Carries the file name so a batch can attribute the failure.
    """

    def __init__(self, file_name: str, cause: object) -> None:
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Failed to extract text from {file_name}: {cause}")


class LegacyDocUnsupportedError(ExtractionError):
    """Raised when a legacy binary .doc cannot be converted."""

    MESSAGE = "DOC file format not fully supported. Please convert to DOCX or PDF."

    def __init__(self, file_name: str) -> None:
        super().__init__(file_name, self.MESSAGE)


class NoTextFoundError(ExtractionError):
    """Raised when OCR recognises no text in an image."""

    MESSAGE = (
        "No readable text found in the image. Please ensure the image contains "
        "clear, readable text."
    )

    def __init__(self, file_name: str) -> None:
        super().__init__(file_name, self.MESSAGE)


class EmptyContentError(ExtractionError):
    """Raised when an extractor produced only whitespace."""

    MESSAGE = "No readable content could be extracted from the file"

    def __init__(self, file_name: str) -> None:
        super().__init__(file_name, self.MESSAGE)

    def __str__(self) -> str:
        return self.MESSAGE
