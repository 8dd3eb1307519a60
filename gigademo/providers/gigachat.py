"""GigaChat REST client: OAuth token lifecycle and chat completions."""

import time
import uuid

import httpx

from gigademo.logging.events import RequestTimer, get_event_logger
from gigademo.providers.base import ChatBackend
from gigademo.providers.errors import AuthenticationError, NetworkError, RequestError
from gigademo.providers.models import ChatRequest, ChatResponse, ClientConfig

# Tokens this close to expiry are treated as already expired
TOKEN_RENEWAL_BUFFER_MS = 60_000


def generate_rquid() -> str:
    """Correlation id for the auth endpoint. Unique per call."""
    return str(uuid.uuid4())


def _now_ms() -> int:
    return int(time.time() * 1000)


class GigaChatClient(ChatBackend):
    """Calls the GigaChat API directly with a cached bearer token.

    The token is refreshed lazily on the first call after it comes within
    TOKEN_RENEWAL_BUFFER_MS of expiry. There is no refresh lock: callers
    racing on an expired token each fetch one and the last response to
    arrive is kept.
    """

    def __init__(self, config: ClientConfig):
        super().__init__(config)
        self._client: httpx.AsyncClient | None = None
        self._access_token: str | None = None
        self._token_expiry: int = 0  # epoch ms, 0 = never fetched

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                verify=self._config.verify_ssl,
                timeout=httpx.Timeout(self._config.timeout, connect=10.0),
            )
        return self._client

    def _has_fresh_token(self) -> bool:
        return (
            self._access_token is not None
            and _now_ms() < self._token_expiry - TOKEN_RENEWAL_BUFFER_MS
        )

    async def get_access_token(self) -> str:
        """Return a usable bearer token, fetching a new one if needed.

        Token state is only written on success; a failed refresh leaves
        the previous token and expiry in place.
        """
        if self._has_fresh_token():
            return self._access_token

        logger = get_event_logger()
        auth_url = f"{self._config.auth_url.rstrip('/')}/api/v2/oauth"
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            "Authorization": f"Basic {self._config.basic_auth()}",
            "RqUID": generate_rquid(),
        }

        client = await self._get_client()
        try:
            response = await client.post(
                auth_url, data={"scope": self._config.scope}, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error(
                "Token request failed",
                extra={"event_data": {"url": auth_url, "error": type(e).__name__}},
            )
            raise NetworkError(f"Cannot reach auth endpoint {auth_url}: {e}") from e

        if not response.is_success:
            logger.warning(
                "Authentication rejected",
                extra={"event_data": {"url": auth_url, "upstream_status": response.status_code}},
            )
            raise AuthenticationError(response.status_code, response.reason_phrase, response.text)

        try:
            payload = response.json()
            token = payload["access_token"]
            expires_at = int(payload["expires_at"])
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError(
                response.status_code, response.reason_phrase, "Malformed token response"
            ) from e
        if not isinstance(token, str) or not token:
            raise AuthenticationError(
                response.status_code, response.reason_phrase, "Malformed token response"
            )

        self._access_token = token
        self._token_expiry = expires_at
        logger.info("Access token acquired", extra={"event_data": {"expires_at": expires_at}})
        return token

    def _build_body(self, request: ChatRequest) -> dict:
        """Merge request-level overrides over configured defaults."""
        config = self._config
        return {
            "model": request.model or config.model,
            "messages": [m.to_wire() for m in request.messages],
            "temperature": request.temperature if request.temperature is not None else config.temperature,
            "max_tokens": request.max_tokens if request.max_tokens is not None else config.max_tokens,
            "stream": False,
        }

    async def chat(self, request: ChatRequest) -> ChatResponse:
        logger = get_event_logger()
        token = await self.get_access_token()

        chat_url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        body = self._build_body(request)
        if request.stream:
            logger.info("Streaming requested but not supported; sending stream=false")
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
        }

        client = await self._get_client()
        try:
            with RequestTimer() as timer:
                response = await client.post(chat_url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error(
                "Chat request failed",
                extra={"event_data": {"url": chat_url, "error": type(e).__name__}},
            )
            raise NetworkError(f"Cannot reach chat endpoint {chat_url}: {e}") from e

        if not response.is_success:
            logger.warning(
                "Chat request rejected",
                extra={"event_data": {
                    "model": body["model"],
                    "upstream_status": response.status_code,
                    "latency_ms": timer.elapsed_ms,
                }},
            )
            raise RequestError(response.status_code, response.reason_phrase, response.text)

        try:
            result = ChatResponse.from_dict(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise RequestError(
                response.status_code, response.reason_phrase, "Malformed chat completion response"
            ) from e

        logger.info(
            "Chat completed",
            extra={"event_data": {
                "model": result.model or body["model"],
                "message_count": len(body["messages"]),
                "latency_ms": timer.elapsed_ms,
                "finish_reasons": [c.finish_reason for c in result.choices],
                "total_tokens": result.usage.total_tokens if result.usage else None,
            }},
        )
        return result

    async def test_connection(self) -> bool:
        """Try to obtain a token. Any failure becomes False."""
        try:
            await self.get_access_token()
        except Exception as e:
            get_event_logger().warning(
                "Connection test failed",
                extra={"event_data": {"error": type(e).__name__, "detail": str(e)}},
            )
            return False
        return True

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
