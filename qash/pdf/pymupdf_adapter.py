import pymupdf

from qash.extraction.base import BaseExtractor
from qash.extraction.exceptions import ExtractionError
from qash.processor.cancellation import CancellationToken
from qash.processor.exceptions import FileDeadlineExceededError


class PyMuPdfAdapter(BaseExtractor):
    """Extracts a flat text stream from PDF bytes using PyMuPDF."""

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        try:
            with pymupdf.open(stream=content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = []
                for page in doc:
                    if token is not None:
                        token.raise_if_cancelled("next PDF page")
                    pages.append(page.get_text())
            return "\n".join(pages).strip()
        except (ExtractionError, FileDeadlineExceededError):
            raise
        except Exception as exc:
            raise ExtractionError(file_name, f"PyMuPDF could not read PDF: {exc}") from exc
