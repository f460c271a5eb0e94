from app.config.settings import Settings
from app.conversation.client_base import BaseChatClient
from app.conversation.echo_client_adapter import EchoChatClientAdapter
from app.conversation.openai_client_adapter import OpenAIChatClientAdapter


class ChatClientFactory:
    """Creates the configured chat client adapter."""

    SUPPORTED_PROVIDERS = ("echo", "openai", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings) -> BaseChatClient:
        provider = settings.chat_provider.strip().lower()
        if provider == "echo":
            return EchoChatClientAdapter()
        if provider in ("openai", "openai_compatible"):
            return OpenAIChatClientAdapter(
                api_key=settings.openai_api_key,
                timeout_seconds=settings.openai_timeout_seconds,
                base_url=cls._resolve_base_url(provider, settings),
            )
        raise ValueError(
            f"Unknown chat provider '{provider}'. Choose from: {list(cls.SUPPORTED_PROVIDERS)}"
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        url = settings.openai_base_url.strip()
        if provider == "openai_compatible" and not url:
            raise ValueError(
                "openai_base_url is required for chat_provider=openai_compatible"
            )
        return url or None
