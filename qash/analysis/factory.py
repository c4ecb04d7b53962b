from typing import ClassVar

from qash.analysis.anthropic_client_adapter import AnthropicClientAdapter
from qash.analysis.client_base import BaseCompletionClient
from qash.analysis.example_client_adapter import ExampleClientAdapter
from qash.analysis.insights import InsightService
from qash.analysis.openai_client_adapter import OpenAIClientAdapter
from qash.analysis.requester import AnalysisRequester
from qash.analysis.retrying_client import RetryingCompletionClient
from qash.config.settings import Settings


class AnalysisClientFactory:
    """Creates the configured completion client and the services built on it."""

    PROVIDERS: ClassVar[tuple[str, ...]] = (
        "anthropic",
        "openai",
        "openai_compatible",
        "example",
    )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseCompletionClient:
        """Create the provider adapter wrapped in bounded retry."""
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "anthropic":
            client: BaseCompletionClient = AnthropicClientAdapter(
                api_key=settings.anthropic_api_key,
                timeout_seconds=settings.anthropic_timeout_seconds,
                base_url=settings.anthropic_base_url,
                api_version=settings.anthropic_version,
            )
        elif provider == "openai":
            client = OpenAIClientAdapter(
                api_key=settings.openai_api_key,
                timeout_seconds=settings.openai_timeout_seconds,
            )
        elif provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            client = OpenAIClientAdapter(
                api_key=settings.openai_compatible_api_key,
                timeout_seconds=settings.openai_timeout_seconds,
                base_url=url,
            )
        else:
            raise ValueError(
                f"Unknown analysis provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        return RetryingCompletionClient(
            client,
            max_attempts=settings.analysis_max_attempts,
            backoff_seconds=settings.analysis_retry_backoff_seconds,
        )

    @classmethod
    def model_name(cls, settings: Settings) -> str:
        provider = settings.analysis_provider.lower()
        names = {
            "anthropic": settings.anthropic_model_name,
            "openai": settings.openai_model_name,
            "openai_compatible": settings.openai_compatible_model_name,
            "example": "example",
        }
        return names.get(provider, "")

    @classmethod
    def create_requester(
        cls,
        settings: Settings,
        client: BaseCompletionClient | None = None,
    ) -> AnalysisRequester:
        return AnalysisRequester(
            client=client or cls.create_client(settings),
            model=cls.model_name(settings),
            max_tokens=settings.analysis_max_tokens,
            temperature=settings.analysis_temperature,
            max_input_chars=settings.analysis_max_input_chars,
        )

    @classmethod
    def create_insight_service(
        cls,
        settings: Settings,
        client: BaseCompletionClient | None = None,
    ) -> InsightService:
        return InsightService(
            client=client or cls.create_client(settings),
            model=cls.model_name(settings),
            chat_max_tokens=settings.chat_max_tokens,
            metrics_max_tokens=settings.analysis_max_tokens,
            temperature=settings.analysis_temperature,
        )
