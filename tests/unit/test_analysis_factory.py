import pytest

from qash.analysis.anthropic_client_adapter import AnthropicClientAdapter
from qash.analysis.example_client_adapter import ExampleClientAdapter
from qash.analysis.factory import AnalysisClientFactory
from qash.analysis.insights import InsightService
from qash.analysis.requester import AnalysisRequester
from qash.analysis.retrying_client import RetryingCompletionClient
from qash.config.settings import Settings


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestAnalysisClientFactory:
    def test_example_provider_is_not_wrapped(self) -> None:
        client = AnalysisClientFactory.create_client(_settings(analysis_provider="example"))
        assert isinstance(client, ExampleClientAdapter)

    def test_anthropic_is_wrapped_in_retry(self) -> None:
        client = AnalysisClientFactory.create_client(
            _settings(analysis_provider="anthropic", anthropic_api_key="k")
        )
        assert isinstance(client, RetryingCompletionClient)
        assert isinstance(client._client, AnthropicClientAdapter)

    def test_openai_compatible_requires_base_url(self) -> None:
        with pytest.raises(ValueError, match="openai_compatible_base_url is required"):
            AnalysisClientFactory.create_client(_settings(analysis_provider="openai_compatible"))

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown analysis provider 'bard'"):
            AnalysisClientFactory.create_client(_settings(analysis_provider="bard"))

    def test_model_name_follows_provider(self) -> None:
        settings = _settings(analysis_provider="anthropic", anthropic_model_name="claude-x")
        assert AnalysisClientFactory.model_name(settings) == "claude-x"

    def test_builds_services_on_shared_client(self) -> None:
        settings = _settings(analysis_provider="example")
        client = ExampleClientAdapter()
        assert isinstance(AnalysisClientFactory.create_requester(settings, client), AnalysisRequester)
        assert isinstance(AnalysisClientFactory.create_insight_service(settings, client), InsightService)
