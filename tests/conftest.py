"""Shared fixtures for the GigaChat demo gateway test suite."""

import time
from unittest.mock import AsyncMock

import httpx
import pytest

from gigademo.config.settings import get_settings
from gigademo.providers.gigachat import GigaChatClient
from gigademo.providers.models import ChatMessage, ChatRequest, ClientConfig

AUTH_KEY = "c2VjcmV0LWF1dGgta2V5"  # base64("secret-auth-key")
AUTH_URL = "https://auth.test"
BASE_URL = "https://giga.test/api/v1"
OAUTH_ENDPOINT = f"{AUTH_URL}/api/v2/oauth"
CHAT_ENDPOINT = f"{BASE_URL}/chat/completions"


@pytest.fixture
def client_config() -> ClientConfig:
    """Config with a pre-encoded authorization key and test endpoints."""
    return ClientConfig(credentials=AUTH_KEY, base_url=BASE_URL, auth_url=AUTH_URL)


@pytest.fixture
def chat_request() -> ChatRequest:
    """Single-turn conversation with no overrides."""
    return ChatRequest(messages=[ChatMessage(role="user", content="Hello")])


@pytest.fixture
def upstream() -> "FakeUpstream":
    return FakeUpstream()


@pytest.fixture
def gigachat(client_config, upstream) -> GigaChatClient:
    """GigaChatClient whose HTTP client is replaced by the fake upstream."""
    client = GigaChatClient(client_config)
    client._client = upstream.client
    return client


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(GIGACHAT_CREDENTIALS="key", CHAT_BACKEND="direct")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()


def now_ms() -> int:
    return int(time.time() * 1000)


def make_response(status_code: int, json=None, text: str = "", url: str = CHAT_ENDPOINT) -> httpx.Response:
    """Build a real httpx.Response bound to a POST request."""
    request = httpx.Request("POST", url)
    if json is not None:
        return httpx.Response(status_code, json=json, request=request)
    return httpx.Response(status_code, text=text, request=request)


def token_payload(token: str = "tok-fresh", ttl_ms: int = 30 * 60 * 1000) -> dict:
    return {"access_token": token, "expires_at": now_ms() + ttl_ms}


def chat_payload(content: str = "Hi there!", model: str = "GigaChat:1.0.26.20") -> dict:
    return {
        "choices": [{
            "message": {"role": "assistant", "content": content},
            "index": 0,
            "finish_reason": "stop",
        }],
        "created": 1718000000,
        "model": model,
        "usage": {"prompt_tokens": 12, "completion_tokens": 4, "total_tokens": 16},
        "object": "chat.completion",
    }


class FakeUpstream:
    """Mocked httpx.AsyncClient routing POSTs by URL and recording them.

    Queue responses (or exceptions) per endpoint with ``on_auth`` and
    ``on_chat``; each call pops the next one.
    """

    def __init__(self):
        self.auth_calls: list = []
        self.chat_calls: list = []
        self._auth_queue: list = []
        self._chat_queue: list = []
        self.client = AsyncMock()
        self.client.is_closed = False
        self.client.post.side_effect = self._post

    def on_auth(self, *responses) -> "FakeUpstream":
        self._auth_queue.extend(responses)
        return self

    def on_chat(self, *responses) -> "FakeUpstream":
        self._chat_queue.extend(responses)
        return self

    async def _post(self, url, **kwargs):
        if url == OAUTH_ENDPOINT:
            self.auth_calls.append(kwargs)
            queue = self._auth_queue
        elif url == CHAT_ENDPOINT:
            self.chat_calls.append(kwargs)
            queue = self._chat_queue
        else:
            raise AssertionError(f"Unexpected POST to {url}")
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
