from qash.analysis.requester import AnalysisRequester
from qash.classification.classifier import FormatClassifier
from qash.extraction.exceptions import EmptyContentError, ExtractionError
from qash.extraction.factory import ExtractorRegistry
from qash.logging.logger import Log
from qash.normalization.normalizer import ResponseNormalizer
from qash.processor.exceptions import FileDeadlineExceededError
from qash.processor.heuristics import classify_document
from qash.processor.models import ExtractionResult
from qash.processor.pipeline import FileState, PipelineContext, PipelineStep


class ClassifyStep(PipelineStep):
    name = "classification"

    def __init__(self, classifier: FormatClassifier) -> None:
        self._classifier = classifier

    def run(self, context: PipelineContext) -> PipelineContext:
        uploaded = context.uploaded
        classification = self._classifier.classify(
            uploaded.media_type, uploaded.name, uploaded.size, uploaded.content
        )
        context.classification = classification
        context.warnings.extend(classification.warnings)
        for warning in classification.warnings:
            Log.warning(warning, file_name=uploaded.name)
        context.state = FileState.CLASSIFIED
        Log.info(
            f"Classified {uploaded.name} as {classification.extractor.value}",
            media_type=classification.media_type,
        )
        return context


class ExtractTextStep(PipelineStep):
    name = "text extraction"

    def __init__(self, registry: ExtractorRegistry) -> None:
        self._registry = registry

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.classification is None:
            raise ValueError("PipelineContext.classification must be set before extraction")
        kind = context.classification.extractor
        extractor = self._registry.get(kind)
        try:
            text = extractor.extract(
                context.uploaded.content,
                media_type=context.classification.media_type,
                file_name=context.file_name,
                token=context.token,
            )
        except (ExtractionError, FileDeadlineExceededError):
            raise
        except Exception as exc:
            raise ExtractionError(context.file_name, exc) from exc
        if not text.strip():
            raise EmptyContentError(context.file_name)
        context.extraction = ExtractionResult(file_name=context.file_name, text=text, extractor=kind)
        context.state = FileState.EXTRACTED
        Log.info(f"Extracted {len(text)} chars from {context.file_name}")
        return context


class DetectDocumentClassStep(PipelineStep):
    name = "document classification"

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before document detection")
        context.document_class = classify_document(context.extraction.text)
        Log.info(f"{context.file_name} routed to {context.document_class.value} template")
        return context


class AnalyzeStep(PipelineStep):
    name = "analysis"

    def __init__(self, requester: AnalysisRequester) -> None:
        self._requester = requester

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before analysis")
        request = self._requester.build_request(
            context.extraction.text,
            file_name=context.file_name,
            media_type=context.uploaded.media_type,
            document_class=context.document_class,
        )
        if request.truncated:
            context.warnings.append(
                f"Document text truncated to {len(request.sanitized_text)} characters for analysis"
            )
        context.analysis_request = request
        context.raw_reply = self._requester.request(request, context.token)
        context.state = FileState.ANALYZED
        return context


class NormalizeStep(PipelineStep):
    name = "normalization"

    def __init__(self, normalizer: ResponseNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        context.analysis = self._normalizer.normalize(context.raw_reply, context.file_name)
        context.state = FileState.NORMALIZED
        return context
