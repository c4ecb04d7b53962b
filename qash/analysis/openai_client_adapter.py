import httpx
import openai

from qash.analysis.client_base import BaseCompletionClient
from qash.analysis.exceptions import AnalysisNetworkError, AnalysisServiceError


class OpenAIClientAdapter(BaseCompletionClient):
    """Completion client for OpenAI and OpenAI-compatible chat APIs."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_completion(
        self,
        *,
        model: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout_seconds: float | None = None,
    ) -> str:
        timeout: float = self._timeout_seconds
        if timeout_seconds is not None:
            timeout = min(timeout, timeout_seconds)
        try:
            response = self._client.with_options(timeout=timeout).chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AnalysisNetworkError(f"AI provider network error: {exc}") from exc
        except (openai.RateLimitError, openai.InternalServerError) as exc:
            raise AnalysisNetworkError(f"AI provider unavailable: {exc}") from exc
        except openai.APIError as exc:
            raise AnalysisServiceError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AnalysisServiceError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise AnalysisServiceError("AI returned empty response")
        return content
