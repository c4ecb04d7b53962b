import httpx

from qash.analysis.client_base import BaseCompletionClient
from qash.analysis.exceptions import AnalysisNetworkError, AnalysisServiceError

_TRANSIENT_STATUS = frozenset({408, 409, 429})


class AnthropicClientAdapter(BaseCompletionClient):
    """Completion client for the Anthropic Messages API over httpx."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str = "https://api.anthropic.com/v1",
        api_version: str = "2023-06-01",
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._url = base_url.rstrip("/") + "/messages"
        self._api_version = api_version
        self._http = http_client or httpx.Client()

    def create_completion(
        self,
        *,
        model: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        timeout_seconds: float | None = None,
    ) -> str:
        timeout = self._timeout_seconds
        if timeout_seconds is not None:
            timeout = min(timeout, timeout_seconds)
        try:
            response = self._http.post(
                self._url,
                json={
                    "model": model,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    "messages": [{"role": "user", "content": prompt}],
                },
                headers={
                    "Content-Type": "application/json",
                    "x-api-key": self._api_key,
                    "anthropic-version": self._api_version,
                },
                timeout=timeout,
            )
        except httpx.TransportError as exc:
            raise AnalysisNetworkError(f"Completion service network error: {exc}") from exc

        if response.status_code >= 500 or response.status_code in _TRANSIENT_STATUS:
            raise AnalysisNetworkError(
                f"Completion service unavailable: HTTP {response.status_code}"
            )
        if response.status_code >= 400:
            raise AnalysisServiceError(
                f"Completion service rejected request: HTTP {response.status_code} "
                f"{response.text[:200]}"
            )
        return self._reply_text(response)

    @staticmethod
    def _reply_text(response: httpx.Response) -> str:
        try:
            payload = response.json()
            text = payload["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise AnalysisServiceError(f"Malformed completion response: {exc}") from exc
        if not isinstance(text, str):
            raise AnalysisServiceError("Completion response text is not a string")
        return text
