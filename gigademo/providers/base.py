"""Abstract base for chat backends."""

from abc import ABC, abstractmethod

from gigademo.providers.errors import ConfigurationError
from gigademo.providers.models import ChatRequest, ChatResponse, ClientConfig, PublicConfig


class ChatBackend(ABC):
    """Base class for chat backend implementations.

    One instance is built at process start and shared by every request.
    """

    def __init__(self, config: ClientConfig):
        if not config.has_credentials:
            raise ConfigurationError(
                "GIGACHAT_CREDENTIALS, or both GIGACHAT_CLIENT_ID and "
                "GIGACHAT_CLIENT_SECRET, must be set"
            )
        self._config = config

    @abstractmethod
    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a chat completion request.

        Args:
            request: Conversation with optional per-request overrides.
                Callers must reject empty message lists beforehand.

        Returns:
            Parsed ChatResponse.

        Raises:
            AuthenticationError, RequestError, NetworkError.
        """
        ...

    @abstractmethod
    async def test_connection(self) -> bool:
        """Check upstream reachability. Returns False instead of raising."""
        ...

    def get_config(self) -> PublicConfig:
        """Non-secret view of the configuration."""
        return self._config.public()

    async def close(self) -> None:
        """Cleanup resources. Override if backend holds connections."""
        pass
