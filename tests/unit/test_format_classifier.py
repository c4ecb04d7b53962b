import pytest

from qash.classification.classifier import FormatClassifier, normalize_media_type
from qash.classification.exceptions import (
    BlockedExtensionError,
    ContentTypeMismatchError,
    EmptyFileError,
    UnsupportedTypeError,
)
from qash.classification.formats import (
    DOC_TYPE,
    DOCX_TYPE,
    XLS_TYPE,
    XLSX_TYPE,
    ContentFamily,
    ExtractorKind,
    sniff_content_family,
)

PDF_BYTES = b"%PDF-1.4 minimal"
ZIP_BYTES = b"PK\x03\x04rest-of-zip"


class TestFormatClassifier:
    @pytest.mark.parametrize(
        ("media_type", "expected"),
        [
            ("application/pdf", ExtractorKind.PDF),
            (DOCX_TYPE, ExtractorKind.WORD),
            (DOC_TYPE, ExtractorKind.WORD),
            (XLSX_TYPE, ExtractorKind.SPREADSHEET),
            (XLS_TYPE, ExtractorKind.SPREADSHEET),
            ("text/csv", ExtractorKind.CSV),
            ("text/plain", ExtractorKind.TEXT),
            ("image/png", ExtractorKind.IMAGE),
            ("image/webp", ExtractorKind.IMAGE),
        ],
    )
    def test_maps_allowed_types(self, media_type: str, expected: ExtractorKind) -> None:
        result = FormatClassifier().classify(media_type, "file.bin", 10)
        assert result.extractor is expected
        assert result.warnings == []

    def test_empty_file_rejected_first(self) -> None:
        with pytest.raises(EmptyFileError, match="Empty file uploaded"):
            FormatClassifier().classify("application/x-msdownload", "tool.exe", 0)

    def test_blocked_extension_wins_over_allowed_type(self) -> None:
        with pytest.raises(BlockedExtensionError, match="security reasons"):
            FormatClassifier().classify("text/plain", "run.sh", 10)

    def test_blocked_extension_is_case_insensitive(self) -> None:
        with pytest.raises(BlockedExtensionError):
            FormatClassifier().classify("application/pdf", "REPORT.EXE", 10)

    def test_unknown_type_names_the_declared_type(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="Unsupported file type: application/zip"):
            FormatClassifier().classify("application/zip", "archive.zip", 10)

    def test_media_type_parameters_are_ignored(self) -> None:
        result = FormatClassifier().classify("Text/Plain; charset=utf-8", "notes.txt", 5)
        assert result.extractor is ExtractorKind.TEXT
        assert result.media_type == "text/plain"

    def test_mismatch_becomes_warning(self) -> None:
        result = FormatClassifier().classify("application/pdf", "fake.pdf", 10, ZIP_BYTES)
        assert result.extractor is ExtractorKind.PDF
        assert result.warnings == [
            "ContentTypeMismatch: declared application/pdf but content looks like ooxml"
        ]

    def test_mismatch_raises_in_strict_mode(self) -> None:
        classifier = FormatClassifier(strict_content_sniffing=True)
        with pytest.raises(ContentTypeMismatchError):
            classifier.classify("text/plain", "notes.txt", 10, PDF_BYTES)

    def test_matching_signature_has_no_warning(self) -> None:
        result = FormatClassifier(strict_content_sniffing=True).classify(
            "application/pdf", "report.pdf", 10, PDF_BYTES
        )
        assert result.warnings == []

    def test_legacy_types_accept_ooxml_content(self) -> None:
        result = FormatClassifier().classify(DOC_TYPE, "letter.doc", 10, ZIP_BYTES)
        assert result.warnings == []


class TestContentSniffing:
    @pytest.mark.parametrize(
        ("content", "family"),
        [
            (PDF_BYTES, ContentFamily.PDF),
            (ZIP_BYTES, ContentFamily.OOXML),
            (bytes.fromhex("D0CF11E0A1B11AE1") + b"\x00" * 8, ContentFamily.OLE2),
            (b"\x89PNG\r\n\x1a\n\x00", ContentFamily.IMAGE),
            (b"RIFF\x00\x00\x00\x00WEBPVP8", ContentFamily.IMAGE),
        ],
    )
    def test_recognises_signatures(self, content: bytes, family: ContentFamily) -> None:
        assert sniff_content_family(content) is family

    def test_plain_text_has_no_family(self) -> None:
        assert sniff_content_family(b"Revenue,Amount\n") is None

    def test_text_starting_with_bm_is_not_an_image(self) -> None:
        assert sniff_content_family(b"BMW quarterly report") is None


class TestNormalizeMediaType:
    def test_none_becomes_empty(self) -> None:
        assert normalize_media_type(None) == ""
