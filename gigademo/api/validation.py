"""Request validation for the chat endpoint.

Runs before the backend is touched, so rejected requests never cost a
token fetch or an upstream call.
"""

import math

from gigademo.providers.errors import ValidationError
from gigademo.providers.models import ROLES, ChatRequest

MISSING_MESSAGES = "Invalid request: messages array is required"


def validate_chat_body(body) -> ChatRequest:
    """Check a decoded JSON body and build a ChatRequest from it.

    Raises:
        ValidationError: with a message suitable for a 400 response.
    """
    if not isinstance(body, dict):
        raise ValidationError("Invalid request: body must be a JSON object")

    messages = body.get("messages")
    if not isinstance(messages, list) or not messages:
        raise ValidationError(MISSING_MESSAGES)

    for i, msg in enumerate(messages):
        if not isinstance(msg, dict):
            raise ValidationError(f"Invalid request: messages[{i}] must be an object")
        if msg.get("role") not in ROLES:
            raise ValidationError(
                f"Invalid request: messages[{i}].role must be one of {', '.join(ROLES)}"
            )
        if not isinstance(msg.get("content"), str):
            raise ValidationError(f"Invalid request: messages[{i}].content must be a string")

    model = body.get("model")
    if model is not None and not isinstance(model, str):
        raise ValidationError("Invalid request: model must be a string")

    temperature = body.get("temperature")
    if temperature is not None and (
        isinstance(temperature, bool)
        or not isinstance(temperature, (int, float))
        or not math.isfinite(temperature)
    ):
        raise ValidationError("Invalid request: temperature must be a finite number")

    max_tokens = body.get("max_tokens")
    if max_tokens is not None and (isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens < 1):
        raise ValidationError("Invalid request: max_tokens must be a positive integer")

    return ChatRequest.from_dict(body)
