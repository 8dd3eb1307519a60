"""LangChain backend: same contract as GigaChatClient, via langchain-gigachat."""

import time

import httpx

from gigademo.logging.events import RequestTimer, get_event_logger
from gigademo.providers.base import ChatBackend
from gigademo.providers.errors import (
    AuthenticationError,
    GigaChatError,
    NetworkError,
    RequestError,
)
from gigademo.providers.models import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    Choice,
    ClientConfig,
    Usage,
)


class LangChainBackend(ChatBackend):
    """Delegates token handling and chat calls to langchain_gigachat.GigaChat."""

    def __init__(self, config: ClientConfig):
        super().__init__(config)
        self._model = None

    def _get_model(self):
        """Lazy-init the chat model (avoids importing langchain when unused)."""
        if self._model is None:
            from langchain_gigachat.chat_models import GigaChat

            config = self._config
            self._model = GigaChat(
                credentials=config.basic_auth(),
                scope=config.scope,
                base_url=config.base_url,
                auth_url=f"{config.auth_url.rstrip('/')}/api/v2/oauth",
                model=config.model,
                verify_ssl_certs=config.verify_ssl,
                timeout=config.timeout,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
            )
        return self._model

    @staticmethod
    def _translate_messages(messages: list[ChatMessage]) -> list:
        """Map chat roles to LangChain message classes."""
        from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

        converted = []
        for msg in messages:
            if msg.role == "system":
                converted.append(SystemMessage(content=msg.content))
            elif msg.role == "user":
                converted.append(HumanMessage(content=msg.content))
            else:
                converted.append(AIMessage(content=msg.content))
        return converted

    @staticmethod
    def _translate_response(reply, model: str) -> ChatResponse:
        """Wrap a LangChain AIMessage as a single-choice ChatResponse."""
        content = reply.content if isinstance(reply.content, str) else str(reply.content)
        metadata = getattr(reply, "response_metadata", None) or {}
        usage_meta = getattr(reply, "usage_metadata", None) or {}

        return ChatResponse(
            choices=[Choice(
                message=ChatMessage(role="assistant", content=content),
                finish_reason=metadata.get("finish_reason") or "stop",
            )],
            created=int(time.time()),
            model=metadata.get("model_name") or model,
            usage=Usage(
                prompt_tokens=usage_meta.get("input_tokens", 0),
                completion_tokens=usage_meta.get("output_tokens", 0),
                total_tokens=usage_meta.get("total_tokens", 0),
            ),
        )

    @staticmethod
    def _upstream_details(error) -> tuple[int, str, str]:
        """Status code, reason phrase and body carried by a gigachat ResponseError.

        The SDK raises ResponseError(url, status_code, content, headers).
        """
        args = error.args
        status = getattr(error, "status_code", None)
        if status is None:
            status = args[1] if len(args) > 1 else 0
        content = getattr(error, "content", None)
        if content is None:
            content = args[2] if len(args) > 2 else b""
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        try:
            status = int(status)
            reason = httpx.codes.get_reason_phrase(status)
        except (TypeError, ValueError):
            status, reason = 0, type(error).__name__
        return status, reason, str(content or "")

    def _model_for(self, request: ChatRequest):
        """Apply per-request overrides on a copy of the shared model."""
        model = self._get_model()
        overrides = {}
        if request.model:
            overrides["model"] = request.model
        if request.temperature is not None:
            overrides["temperature"] = request.temperature
        if request.max_tokens is not None:
            overrides["max_tokens"] = request.max_tokens
        if overrides:
            return model.model_copy(update=overrides)
        return model

    async def chat(self, request: ChatRequest) -> ChatResponse:
        logger = get_event_logger()
        effective_model = request.model or self._config.model
        messages = self._translate_messages(request.messages)

        from gigachat.exceptions import AuthenticationError as SdkAuthenticationError
        from gigachat.exceptions import ResponseError as SdkResponseError

        try:
            with RequestTimer() as timer:
                reply = await self._model_for(request).ainvoke(messages)
        except GigaChatError:
            raise
        except SdkAuthenticationError as e:
            status, reason, body = self._upstream_details(e)
            logger.warning(
                "Authentication rejected",
                extra={"event_data": {"backend": "langchain", "upstream_status": status}},
            )
            raise AuthenticationError(status, reason, body) from e
        except SdkResponseError as e:
            status, reason, body = self._upstream_details(e)
            logger.warning(
                "Chat request rejected",
                extra={"event_data": {"backend": "langchain", "upstream_status": status}},
            )
            raise RequestError(status, reason, body) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Cannot reach GigaChat: {e}") from e
        except Exception as e:
            logger.warning(
                "LangChain chat failed",
                extra={"event_data": {"model": effective_model, "error": type(e).__name__}},
            )
            raise RequestError(0, type(e).__name__, str(e)) from e

        result = self._translate_response(reply, effective_model)
        logger.info(
            "Chat completed",
            extra={"event_data": {
                "backend": "langchain",
                "model": result.model,
                "message_count": len(messages),
                "latency_ms": timer.elapsed_ms,
            }},
        )
        return result

    async def test_connection(self) -> bool:
        """Send a one-word prompt. Any failure becomes False."""
        try:
            await self.chat(ChatRequest(messages=[ChatMessage(role="user", content="Hello")]))
        except Exception as e:
            get_event_logger().warning(
                "Connection test failed",
                extra={"event_data": {"backend": "langchain", "error": type(e).__name__}},
            )
            return False
        return True

    async def close(self) -> None:
        self._model = None
