import io

import pdfplumber

from qash.extraction.base import BaseExtractor
from qash.extraction.exceptions import ExtractionError
from qash.processor.cancellation import CancellationToken
from qash.processor.exceptions import FileDeadlineExceededError


class PdfPlumberAdapter(BaseExtractor):
    """Extracts a flat text stream from PDF bytes using pdfplumber."""

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = []
                for page in pdf.pages:
                    if token is not None:
                        token.raise_if_cancelled("next PDF page")
                    pages.append(page.extract_text() or "")
            return "\n".join(pages).strip()
        except (ExtractionError, FileDeadlineExceededError):
            raise
        except Exception as exc:
            raise ExtractionError(file_name, f"pdfplumber could not read PDF: {exc}") from exc
