from qash.extraction.base import BaseExtractor
from qash.processor.cancellation import CancellationToken


class PlainTextExtractor(BaseExtractor):
    """Returns the upload decoded as UTF-8, otherwise untouched."""

    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        return content.decode("utf-8", errors="replace")
