from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from qash.analysis.exceptions import AnalysisNetworkError, AnalysisServiceError
from qash.analysis.openai_client_adapter import OpenAIClientAdapter


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _adapter_with(mock_client: MagicMock) -> OpenAIClientAdapter:
    with patch(
        "qash.analysis.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIClientAdapter(api_key="k", timeout_seconds=30)


def _create(adapter: OpenAIClientAdapter, timeout: float | None = None) -> str:
    return adapter.create_completion(
        model="m", prompt="user", max_tokens=50, temperature=0.1, timeout_seconds=timeout
    )


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        completions = mock_client.with_options.return_value.chat.completions
        completions.create.return_value = _make_mock_response('{"ok": true}')
        adapter = _adapter_with(mock_client)

        assert _create(adapter, timeout=10) == '{"ok": true}'
        mock_client.with_options.assert_called_once_with(timeout=10)
        _, kwargs = completions.create.call_args
        assert kwargs["messages"] == [{"role": "user", "content": "user"}]
        assert kwargs["max_tokens"] == 50

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.with_options.return_value.chat.completions.create.return_value = (
            _make_mock_response(None)
        )
        with pytest.raises(AnalysisServiceError, match="empty response"):
            _create(_adapter_with(mock_client))

    def test_connection_error_is_transient(self) -> None:
        mock_client = MagicMock()
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.with_options.return_value.chat.completions.create.side_effect = (
            openai.APIConnectionError(request=request)
        )
        with pytest.raises(AnalysisNetworkError):
            _create(_adapter_with(mock_client))

    def test_rate_limit_is_transient(self) -> None:
        mock_client = MagicMock()
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(429, request=request)
        mock_client.with_options.return_value.chat.completions.create.side_effect = (
            openai.RateLimitError("slow down", response=response, body=None)
        )
        with pytest.raises(AnalysisNetworkError):
            _create(_adapter_with(mock_client))

    def test_bad_request_is_permanent(self) -> None:
        mock_client = MagicMock()
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(400, request=request)
        mock_client.with_options.return_value.chat.completions.create.side_effect = (
            openai.BadRequestError("bad", response=response, body=None)
        )
        with pytest.raises(AnalysisServiceError) as exc_info:
            _create(_adapter_with(mock_client))
        assert not isinstance(exc_info.value, AnalysisNetworkError)
