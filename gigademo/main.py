"""GigaChat Demo Gateway: FastAPI application entry point.

Serves chat and settings endpoints for the demo UI, backed by one
process-wide chat backend that owns the GigaChat bearer token.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gigademo.api.validation import validate_chat_body
from gigademo.config.settings import get_settings
from gigademo.logging.events import (
    generate_request_id,
    get_event_logger,
    request_id_var,
    setup_logging,
)
from gigademo.providers.base import ChatBackend
from gigademo.providers.errors import GigaChatError, ValidationError
from gigademo.providers.factory import create_backend

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the chat backend once at startup and close it on shutdown.

    A ConfigurationError here aborts startup.
    """
    setup_logging()
    settings = get_settings()
    app.state.backend = create_backend(settings)
    get_event_logger().info(
        "Gateway started",
        extra={"event_data": {
            "backend": settings.chat_backend,
            "config": app.state.backend.get_config().to_dict(),
        }},
    )
    yield
    await app.state.backend.close()
    app.state.backend = None
    get_event_logger().info("Gateway stopped")


app = FastAPI(
    title="GigaChat Demo Gateway",
    description="Chat and settings API for the GigaChat demo",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    rid = generate_request_id()
    request_id_var.set(rid)
    response = await call_next(request)
    response.headers["X-Request-Id"] = rid
    return response


def get_backend(request: Request) -> ChatBackend:
    """FastAPI dependency returning the backend built by the lifespan hook."""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise HTTPException(status_code=503, detail="Chat backend is not initialised")
    return backend


@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.post("/api/chat")
async def chat(request: Request, backend: ChatBackend = Depends(get_backend)):
    """Validate the conversation, forward it, return the completion."""
    logger = get_event_logger()

    try:
        body = await request.json()
    except ValueError:
        body = None

    try:
        chat_request = validate_chat_body(body)
    except ValidationError as e:
        logger.warning("Chat request rejected", extra={"event_data": {"reason": str(e)}})
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        response = await backend.chat(chat_request)
    except GigaChatError as e:
        logger.error(
            "Chat request failed",
            extra={"event_data": {
                "error_type": type(e).__name__,
                "upstream_status": getattr(e, "status_code", None),
            }},
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process chat request", "details": str(e)},
        )

    return response.to_dict()


@app.get("/api/config")
async def get_config(backend: ChatBackend = Depends(get_backend)):
    """Public configuration, without credentials or tokens."""
    return {"success": True, "config": backend.get_config().to_dict()}


@app.post("/api/config")
async def test_connection(request: Request):
    """Connection check. Always 200 so the UI can read `connected`."""
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        return {"success": False, "connected": False, "error": "Chat backend is not initialised"}

    connected = await backend.test_connection()
    get_event_logger().info("Connection test", extra={"event_data": {"connected": connected}})
    return {"success": True, "connected": connected}
