"""Chat and client configuration models."""

import base64
from dataclasses import asdict, dataclass, field

DEFAULT_BASE_URL = "https://gigachat.devices.sberbank.ru/api/v1"
DEFAULT_AUTH_URL = "https://ngw.devices.sberbank.ru:9443"
DEFAULT_SCOPE = "GIGACHAT_API_PERS"

ROLES = ("user", "assistant", "system")


@dataclass(frozen=True)
class PublicConfig:
    """Config snapshot safe for public endpoints. Has no secret fields."""

    base_url: str
    verify_ssl: bool
    model: str
    temperature: float
    max_tokens: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ClientConfig:
    # Secrets: either a pre-encoded authorization key or an id/secret pair
    credentials: str = field(default="", repr=False)
    client_id: str = field(default="", repr=False)
    client_secret: str = field(default="", repr=False)

    base_url: str = DEFAULT_BASE_URL
    auth_url: str = DEFAULT_AUTH_URL
    scope: str = DEFAULT_SCOPE
    verify_ssl: bool = True
    model: str = "GigaChat"
    temperature: float = 0.7
    max_tokens: int = 1024
    timeout: float = 60.0

    @classmethod
    def from_settings(cls, settings) -> "ClientConfig":
        return cls(
            credentials=settings.gigachat_credentials,
            client_id=settings.gigachat_client_id,
            client_secret=settings.gigachat_client_secret,
            base_url=settings.gigachat_base_url,
            auth_url=settings.gigachat_auth_url,
            scope=settings.gigachat_scope,
            verify_ssl=settings.gigachat_verify_ssl_certs,
            model=settings.gigachat_model,
            temperature=settings.gigachat_temperature,
            max_tokens=settings.gigachat_max_tokens,
            timeout=settings.gigachat_timeout,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.credentials) or bool(self.client_id and self.client_secret)

    def basic_auth(self) -> str:
        """Value for the Basic Authorization header.

        A pre-encoded authorization key wins over the id/secret pair.
        """
        if self.credentials:
            return self.credentials
        raw = f"{self.client_id}:{self.client_secret}".encode()
        return base64.b64encode(raw).decode("ascii")

    def public(self) -> PublicConfig:
        return PublicConfig(
            base_url=self.base_url,
            verify_ssl=self.verify_ssl,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


@dataclass
class ChatMessage:
    role: str  # "user" | "assistant" | "system"
    content: str
    timestamp: int | None = None  # client-side only, never sent upstream

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(
            role=data.get("role", ""),
            content=data.get("content", "") or "",
            timestamp=data.get("timestamp"),
        )

    def to_wire(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatRequest:
    messages: list[ChatMessage]
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    stream: bool = False  # accepted but never honoured upstream

    @classmethod
    def from_dict(cls, data: dict) -> "ChatRequest":
        return cls(
            messages=[ChatMessage.from_dict(m) for m in data.get("messages", [])],
            model=data.get("model") or None,
            temperature=data.get("temperature"),
            max_tokens=data.get("max_tokens"),
            stream=bool(data.get("stream", False)),
        )


@dataclass
class Choice:
    message: ChatMessage
    finish_reason: str


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatResponse:
    choices: list[Choice]
    created: int
    model: str
    usage: Usage | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ChatResponse":
        """Parse an upstream chat completion body.

        Raises KeyError/TypeError/AttributeError on a structurally broken body.
        """
        usage = data.get("usage")
        return cls(
            choices=[
                Choice(
                    message=ChatMessage.from_dict(c["message"]),
                    finish_reason=c.get("finish_reason", ""),
                )
                for c in data["choices"]
            ],
            created=data.get("created", 0),
            model=data.get("model", ""),
            usage=Usage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            ) if usage else None,
        )

    def to_dict(self) -> dict:
        body = {
            "choices": [
                {"message": c.message.to_wire(), "finish_reason": c.finish_reason}
                for c in self.choices
            ],
            "created": self.created,
            "model": self.model,
        }
        if self.usage is not None:
            body["usage"] = asdict(self.usage)
        return body
