from abc import ABC, abstractmethod

from qash.processor.cancellation import CancellationToken


class BaseExtractor(ABC):
    """Contract for all per-format text extractors."""

    @abstractmethod
    def extract(
        self,
        content: bytes,
        *,
        media_type: str,
        file_name: str,
        token: CancellationToken | None = None,
    ) -> str:
        """Convert raw file bytes to plain text.

        Args:
            content: Raw upload bytes.
            media_type: Normalized declared media type.
            file_name: Original file name, used in error messages.
            token: Per-file cancellation token for blocking work.

        Returns:
            Extracted plain text.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """
