from dataclasses import dataclass, field

from qash.classification.exceptions import (
    BlockedExtensionError,
    ContentTypeMismatchError,
    EmptyFileError,
    UnsupportedTypeError,
)
from qash.classification.formats import (
    BLOCKED_EXTENSIONS,
    MEDIA_TYPES,
    ExtractorKind,
    expected_families,
    sniff_content_family,
)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one upload."""

    media_type: str
    extractor: ExtractorKind
    warnings: list[str] = field(default_factory=list)


def normalize_media_type(declared_type: str | None) -> str:
    """Lower-case a media type and drop parameters such as ``charset``."""
    if not declared_type:
        return ""
    return declared_type.split(";", 1)[0].strip().lower()


class FormatClassifier:
    """Maps a declared media type and file name to an extractor family.

    Checks run in a fixed order: empty file, blocked extension, media-type
    allow-list, then a content-signature comparison.
    """

    def __init__(self, *, strict_content_sniffing: bool = False) -> None:
        self._strict = strict_content_sniffing

    def classify(
        self,
        declared_type: str | None,
        file_name: str,
        size: int,
        content: bytes = b"",
    ) -> Classification:
        """Classify an upload.

        Raises:
            EmptyFileError: if ``size`` is 0.
            BlockedExtensionError: if the extension is on the deny-list.
            UnsupportedTypeError: if the media type is not allowed.
            ContentTypeMismatchError: in strict mode, on a signature mismatch.
        """
        if size == 0:
            raise EmptyFileError("Empty file uploaded")
        if self._has_blocked_extension(file_name):
            raise BlockedExtensionError("File type not allowed for security reasons")

        media_type = normalize_media_type(declared_type)
        extractor = MEDIA_TYPES.get(media_type)
        if extractor is None:
            raise UnsupportedTypeError(
                f"Unsupported file type: {declared_type or 'unknown'}. Please upload "
                "PDF, Word, Excel, CSV, TXT, or image files."
            )

        warnings: list[str] = []
        mismatch = self._content_mismatch(media_type, content)
        if mismatch:
            if self._strict:
                raise ContentTypeMismatchError(mismatch)
            warnings.append(mismatch)
        return Classification(media_type=media_type, extractor=extractor, warnings=warnings)

    @staticmethod
    def _has_blocked_extension(file_name: str) -> bool:
        return file_name.lower().endswith(BLOCKED_EXTENSIONS)

    @staticmethod
    def _content_mismatch(media_type: str, content: bytes) -> str:
        sniffed = sniff_content_family(content)
        if sniffed is None or sniffed in expected_families(media_type):
            return ""
        return (
            f"ContentTypeMismatch: declared {media_type} but content looks like "
            f"{sniffed.value}"
        )
