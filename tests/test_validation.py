"""Tests for gigademo/api/validation.py: chat request validation."""

import pytest

from gigademo.api.validation import MISSING_MESSAGES, validate_chat_body
from gigademo.providers.errors import ValidationError


class TestValidateChatBody:

    def test_valid_body(self):
        request = validate_chat_body({
            "model": "GigaChat",
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hello"},
            ],
            "temperature": 0.2,
            "max_tokens": 100,
        })
        assert request.model == "GigaChat"
        assert [m.role for m in request.messages] == ["system", "user"]
        assert request.temperature == 0.2
        assert request.max_tokens == 100

    @pytest.mark.parametrize("body", [
        {"messages": []},
        {},
        {"messages": None},
        {"messages": "hello"},
    ])
    def test_missing_or_empty_messages(self, body):
        with pytest.raises(ValidationError, match=MISSING_MESSAGES):
            validate_chat_body(body)

    def test_non_object_body(self):
        with pytest.raises(ValidationError, match="JSON object"):
            validate_chat_body([{"role": "user", "content": "x"}])

    def test_none_body(self):
        with pytest.raises(ValidationError):
            validate_chat_body(None)

    def test_unknown_role(self):
        with pytest.raises(ValidationError, match=r"messages\[0\]\.role"):
            validate_chat_body({"messages": [{"role": "function", "content": "x"}]})

    def test_non_string_content(self):
        with pytest.raises(ValidationError, match=r"messages\[1\]\.content"):
            validate_chat_body({"messages": [
                {"role": "user", "content": "ok"},
                {"role": "user", "content": 42},
            ]})

    def test_message_not_object(self):
        with pytest.raises(ValidationError, match="must be an object"):
            validate_chat_body({"messages": ["hi"]})

    @pytest.mark.parametrize("temperature", ["hot", True, [0.1], float("nan"), float("inf"), float("-inf")])
    def test_bad_temperature(self, temperature):
        with pytest.raises(ValidationError, match="temperature"):
            validate_chat_body({"messages": [{"role": "user", "content": "x"}], "temperature": temperature})

    def test_zero_temperature_allowed(self):
        request = validate_chat_body({"messages": [{"role": "user", "content": "x"}], "temperature": 0})
        assert request.temperature == 0

    @pytest.mark.parametrize("max_tokens", [0, -5, 1.5, "10", False])
    def test_bad_max_tokens(self, max_tokens):
        with pytest.raises(ValidationError, match="max_tokens"):
            validate_chat_body({"messages": [{"role": "user", "content": "x"}], "max_tokens": max_tokens})

    def test_bad_model_type(self):
        with pytest.raises(ValidationError, match="model"):
            validate_chat_body({"messages": [{"role": "user", "content": "x"}], "model": 7})
