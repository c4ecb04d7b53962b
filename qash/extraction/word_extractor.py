import io

from docx import Document
from docx.document import Document as DocxDocument

from qash.classification.formats import DOC_TYPE
from qash.extraction.base import BaseExtractor
from qash.extraction.exceptions import ExtractionError, LegacyDocUnsupportedError
from qash.processor.cancellation import CancellationToken


class WordExtractor(BaseExtractor):
    """Raw text from word-processor documents using python-docx.

    Legacy ``application/msword`` uploads go through the same converter; when
    that fails the user is told to convert the file instead of getting a
    generic parser error.
    """

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        try:
            document = Document(io.BytesIO(content))
        except Exception as exc:
            if media_type == DOC_TYPE:
                raise LegacyDocUnsupportedError(file_name) from exc
            raise ExtractionError(file_name, f"could not open Word document: {exc}") from exc

        try:
            return self._document_text(document)
        except Exception as exc:
            raise ExtractionError(file_name, f"could not read Word document: {exc}") from exc

    @staticmethod
    def _document_text(document: DocxDocument) -> str:
        lines = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    lines.append("\t".join(cells))
        return "\n".join(lines)
