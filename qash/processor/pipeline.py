from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from qash.analysis.models import AnalysisRequest, DocumentClass
from qash.classification.classifier import Classification
from qash.normalization.models import NormalizedAnalysis
from qash.processor.cancellation import CancellationToken
from qash.processor.models import ExtractionResult, UploadedFile


class FileState(str, Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    EXTRACTED = "extracted"
    ANALYZED = "analyzed"
    NORMALIZED = "normalized"
    FAILED = "failed"


@dataclass(slots=True)
class PipelineContext:
    uploaded: UploadedFile
    token: CancellationToken
    state: FileState = FileState.RECEIVED
    classification: Classification | None = None
    extraction: ExtractionResult | None = None
    document_class: DocumentClass = DocumentClass.GENERAL
    analysis_request: AnalysisRequest | None = None
    raw_reply: str = ""
    analysis: NormalizedAnalysis | None = None
    warnings: list[str] = field(default_factory=list)
    error_message: str = ""

    @property
    def file_name(self) -> str:
        return self.uploaded.name


class PipelineStep(ABC):
    """One stage of the per-file pipeline; ``name`` is used in deadline checks."""

    name: str = "step"

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
