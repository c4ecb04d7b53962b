import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from qash.classification.formats import ExtractorKind
from qash.normalization.models import NormalizedAnalysis


@dataclass(frozen=True)
class UploadedFile:
    """One file of an upload request. Lives only for the request."""

    name: str
    media_type: str
    size: int
    content: bytes

    @classmethod
    def from_bytes(cls, name: str, media_type: str, content: bytes) -> "UploadedFile":
        return cls(name=name, media_type=media_type, size=len(content), content=content)

    @property
    def content_hash(self) -> str:
        return hashlib.sha256(self.content).hexdigest()


@dataclass(frozen=True)
class ExtractionResult:
    """Plain text produced for one file and the extractor that produced it."""

    file_name: str
    text: str
    extractor: ExtractorKind


@dataclass(frozen=True)
class FileAnalysis:
    """Successful per-file outcome."""

    file_name: str
    file_type: str
    file_size: int
    analysis: NormalizedAnalysis
    is_financial: bool
    extracted_text_length: int
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "fileName": self.file_name,
            "fileType": self.file_type,
            "fileSize": self.file_size,
            "analysis": self.analysis.to_dict(),
            "isFinancial": self.is_financial,
            "extractedTextLength": self.extracted_text_length,
        }
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        return payload


@dataclass(frozen=True)
class FileError:
    """Failed per-file outcome."""

    file_name: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"fileName": self.file_name, "error": self.error}


FileResult = FileAnalysis | FileError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def batch_hash(files: list[UploadedFile]) -> str:
    """SHA-256 over the per-file digests in upload order."""
    digest = hashlib.sha256()
    for uploaded in files:
        digest.update(uploaded.content_hash.encode("ascii"))
    return digest.hexdigest()


@dataclass(frozen=True)
class BatchResult:
    """Per-file results of one upload, in upload order."""

    files: list[FileResult]
    total_files: int
    file_hash: str = ""
    timestamp: datetime = field(default_factory=_utc_now)

    @property
    def succeeded(self) -> list[FileAnalysis]:
        return [result for result in self.files if isinstance(result, FileAnalysis)]

    @property
    def failed(self) -> list[FileError]:
        return [result for result in self.files if isinstance(result, FileError)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "files": [result.to_dict() for result in self.files],
            "totalFiles": self.total_files,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }
