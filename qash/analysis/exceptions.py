class AnalysisServiceError(Exception):
    """Raised when the completion service cannot produce an analysis."""


class AnalysisNetworkError(AnalysisServiceError):
    """Raised on transient failures: connection errors, timeouts, 429 and 5xx replies."""


class PromptTemplateError(AnalysisServiceError):
    """Raised when a bundled prompt template cannot be loaded or rendered."""
