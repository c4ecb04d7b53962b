from collections.abc import Callable, Sequence

from qash.analysis.factory import AnalysisClientFactory
from qash.analysis.models import DocumentClass
from qash.analysis.requester import AnalysisRequester
from qash.classification.classifier import FormatClassifier
from qash.config.settings import Settings
from qash.extraction.factory import ExtractorFactory, ExtractorRegistry
from qash.logging.logger import Log
from qash.normalization.normalizer import ResponseNormalizer
from qash.ocr.base import BaseOcrEngine
from qash.processor.cancellation import CancellationToken
from qash.processor.models import (
    BatchResult,
    FileAnalysis,
    FileError,
    FileResult,
    UploadedFile,
    batch_hash,
)
from qash.processor.pipeline import FileState, PipelineContext, PipelineStep
from qash.processor.steps import (
    AnalyzeStep,
    ClassifyStep,
    DetectDocumentClassStep,
    ExtractTextStep,
    NormalizeStep,
)

TokenFactory = Callable[[], CancellationToken]


class Processor:
    """Runs every uploaded file through the pipeline steps, one file at a time.

    Pipeline: classify -> extract -> detect document class -> analyze -> normalize.
    A failure ends that file's run with an error entry; the rest of the batch
    carries on and keeps its upload order.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        token_factory: TokenFactory = CancellationToken.unbounded,
    ) -> None:
        self._steps = list(steps)
        self._token_factory = token_factory

    def process(self, files: Sequence[UploadedFile]) -> BatchResult:
        """Process a batch and return per-file results in upload order."""
        Log.info(f"Processing files: {[uploaded.name for uploaded in files]}")
        results = [self.process_file(uploaded) for uploaded in files]
        batch = BatchResult(
            files=results,
            total_files=len(files),
            file_hash=batch_hash(list(files)),
        )
        Log.info(
            f"Batch complete: {len(batch.succeeded)}/{batch.total_files} file(s) analyzed",
            failed=len(batch.failed),
        )
        return batch

    def process_file(self, uploaded: UploadedFile) -> FileResult:
        Log.info(
            f"Processing file {uploaded.name}",
            media_type=uploaded.media_type,
            size=uploaded.size,
        )
        context = PipelineContext(uploaded=uploaded, token=self._token_factory())
        try:
            for step in self._steps:
                context.token.raise_if_cancelled(step.name)
                context = step.run(context)
        except Exception as exc:
            context.state = FileState.FAILED
            context.error_message = str(exc)
            Log.error(f"Error processing file {uploaded.name}: {exc}")
            return FileError(file_name=uploaded.name, error=context.error_message)
        return self._to_result(context)

    @staticmethod
    def _to_result(context: PipelineContext) -> FileResult:
        if context.analysis is None or context.extraction is None:
            return FileError(
                file_name=context.file_name,
                error=f"Pipeline stopped in state {context.state.value}",
            )
        return FileAnalysis(
            file_name=context.file_name,
            file_type=context.uploaded.media_type,
            file_size=context.uploaded.size,
            analysis=context.analysis,
            is_financial=context.document_class is DocumentClass.FINANCIAL,
            extracted_text_length=len(context.extraction.text),
            warnings=list(context.warnings),
        )


def build_steps(
    classifier: FormatClassifier,
    registry: ExtractorRegistry,
    requester: AnalysisRequester,
    normalizer: ResponseNormalizer | None = None,
) -> list[PipelineStep]:
    return [
        ClassifyStep(classifier),
        ExtractTextStep(registry),
        DetectDocumentClassStep(),
        AnalyzeStep(requester),
        NormalizeStep(normalizer or ResponseNormalizer()),
    ]


def build_processor(
    settings: Settings,
    requester: AnalysisRequester | None = None,
    ocr_engine: BaseOcrEngine | None = None,
) -> Processor:
    """Build a Processor with all adapters configured from settings."""
    steps = build_steps(
        FormatClassifier(strict_content_sniffing=settings.strict_content_sniffing),
        ExtractorFactory.create(settings, ocr_engine=ocr_engine),
        requester or AnalysisClientFactory.create_requester(settings),
    )
    deadline = settings.file_deadline_seconds
    return Processor(
        steps=steps,
        token_factory=lambda: CancellationToken(deadline if deadline > 0 else None),
    )
