"""Factory for chat backends."""

from gigademo.config.settings import Settings
from gigademo.providers.base import ChatBackend
from gigademo.providers.errors import ConfigurationError
from gigademo.providers.gigachat import GigaChatClient
from gigademo.providers.langchain import LangChainBackend
from gigademo.providers.models import ClientConfig

BACKENDS = ("direct", "langchain")


def create_backend(settings: Settings) -> ChatBackend:
    """Build the process-wide chat backend.

    Call once at startup and hold on to the result: the backend caches the
    bearer token, so building a second one discards it.
    """
    config = ClientConfig.from_settings(settings)
    name = settings.chat_backend.strip().lower()

    if name == "direct":
        return GigaChatClient(config)
    if name == "langchain":
        return LangChainBackend(config)

    raise ConfigurationError(f"Unknown chat backend: {settings.chat_backend!r} (expected one of {BACKENDS})")
