"""Static tables describing which uploads qash accepts and how to read them."""

from dataclasses import dataclass
from enum import Enum


class ExtractorKind(str, Enum):
    """Identifier of the extractor family that handles a media type."""

    PDF = "pdf"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    CSV = "csv"
    TEXT = "text"
    IMAGE = "image"


DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_TYPE = "application/msword"
XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_TYPE = "application/vnd.ms-excel"

MEDIA_TYPES: dict[str, ExtractorKind] = {
    "application/pdf": ExtractorKind.PDF,
    DOCX_TYPE: ExtractorKind.WORD,
    DOC_TYPE: ExtractorKind.WORD,
    XLSX_TYPE: ExtractorKind.SPREADSHEET,
    XLS_TYPE: ExtractorKind.SPREADSHEET,
    "text/csv": ExtractorKind.CSV,
    "text/plain": ExtractorKind.TEXT,
    "image/jpeg": ExtractorKind.IMAGE,
    "image/jpg": ExtractorKind.IMAGE,
    "image/png": ExtractorKind.IMAGE,
    "image/gif": ExtractorKind.IMAGE,
    "image/bmp": ExtractorKind.IMAGE,
    "image/tiff": ExtractorKind.IMAGE,
    "image/webp": ExtractorKind.IMAGE,
}

BLOCKED_EXTENSIONS: tuple[str, ...] = (
    ".exe", ".com", ".bat", ".cmd", ".msi", ".app", ".deb", ".rpm",
    ".sh", ".ps1", ".vbs", ".js", ".jar", ".py", ".rb", ".php",
    ".dll", ".so", ".dylib", ".sys", ".scr", ".pif", ".gadget",
    ".wsf", ".hta", ".apk", ".ipa", ".bin", ".run", ".out",
)


class ContentFamily(str, Enum):
    """Container format recognised from leading bytes."""

    PDF = "pdf"
    OOXML = "ooxml"
    OLE2 = "ole2"
    IMAGE = "image"


SIGNATURES: tuple[tuple[bytes, ContentFamily], ...] = (
    (b"%PDF", ContentFamily.PDF),
    (b"PK\x03\x04", ContentFamily.OOXML),
    (bytes.fromhex("D0CF11E0A1B11AE1"), ContentFamily.OLE2),
    (b"\x89PNG\r\n\x1a\n", ContentFamily.IMAGE),
    (b"\xff\xd8\xff", ContentFamily.IMAGE),
    (b"GIF87a", ContentFamily.IMAGE),
    (b"GIF89a", ContentFamily.IMAGE),
    (b"II*\x00", ContentFamily.IMAGE),
    (b"MM\x00*", ContentFamily.IMAGE),
)

# Families a declared type may legitimately sniff as. Text formats carry no
# signature, so any recognised binary container under them is a mismatch.
EXPECTED_FAMILIES: dict[str, frozenset[ContentFamily]] = {
    "application/pdf": frozenset({ContentFamily.PDF}),
    DOCX_TYPE: frozenset({ContentFamily.OOXML}),
    DOC_TYPE: frozenset({ContentFamily.OLE2, ContentFamily.OOXML}),
    XLSX_TYPE: frozenset({ContentFamily.OOXML}),
    XLS_TYPE: frozenset({ContentFamily.OLE2, ContentFamily.OOXML}),
    "text/csv": frozenset(),
    "text/plain": frozenset(),
}


def sniff_content_family(content: bytes) -> ContentFamily | None:
    """Return the container family implied by the leading bytes, if known."""
    for prefix, family in SIGNATURES:
        if content.startswith(prefix):
            return family
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return ContentFamily.IMAGE
    if content[:2] == b"BM" and content[6:10] == b"\x00\x00\x00\x00":
        return ContentFamily.IMAGE
    return None


def expected_families(media_type: str) -> frozenset[ContentFamily]:
    if MEDIA_TYPES.get(media_type) is ExtractorKind.IMAGE:
        return frozenset({ContentFamily.IMAGE})
    return EXPECTED_FAMILIES.get(media_type, frozenset())


@dataclass(frozen=True)
class FormatFamily:
    """Human-facing description of one supported upload family."""

    type: str
    extensions: tuple[str, ...]
    description: str


SUPPORTED_FORMATS: tuple[FormatFamily, ...] = (
    FormatFamily("PDF", (".pdf",), "PDF documents with text content"),
    FormatFamily("Word", (".docx", ".doc"), "Microsoft Word documents"),
    FormatFamily("Excel", (".xlsx", ".xls"), "Excel spreadsheets for financial data"),
    FormatFamily("CSV", (".csv",), "Comma-separated values files"),
    FormatFamily("Text", (".txt",), "Plain text files"),
    FormatFamily(
        "Images",
        (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".webp"),
        "Image files with OCR text extraction",
    ),
)
