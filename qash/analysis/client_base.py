from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for provider-specific text-completion clients."""

    @abstractmethod
    def create_completion(
        self,
        *,
        model: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout_seconds: float | None = None,
    ) -> str:
        """Send one user prompt and return the model's reply as plain text.

        Raises:
            AnalysisNetworkError: on transient transport or provider failures.
            AnalysisServiceError: on any other failure.
        """
