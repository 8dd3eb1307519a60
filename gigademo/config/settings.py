"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # GigaChat credentials
    # Either a pre-encoded authorization key, or a client id/secret pair
    gigachat_credentials: str = ""
    gigachat_client_id: str = ""
    gigachat_client_secret: str = ""

    # GigaChat endpoints
    gigachat_base_url: str = "https://gigachat.devices.sberbank.ru/api/v1"
    gigachat_auth_url: str = "https://ngw.devices.sberbank.ru:9443"
    gigachat_scope: str = "GIGACHAT_API_PERS"
    gigachat_verify_ssl_certs: bool = True
    gigachat_timeout: float = 60.0  # seconds, per upstream call

    # Model defaults (request-level values take precedence)
    gigachat_model: str = "GigaChat"
    gigachat_temperature: float = 0.7
    gigachat_max_tokens: int = 1024

    # Backend selection
    chat_backend: str = "direct"  # "direct" | "langchain"

    # HTTP layer
    cors_allow_origins: str = "*"

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
