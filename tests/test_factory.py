"""Tests for gigademo/providers/factory.py: create_backend."""

import pytest

from gigademo.config.settings import get_settings
from gigademo.providers.errors import ConfigurationError
from gigademo.providers.factory import create_backend
from gigademo.providers.gigachat import GigaChatClient
from gigademo.providers.langchain import LangChainBackend


class TestCreateBackend:

    def test_direct_backend(self, override_settings):
        override_settings(GIGACHAT_CREDENTIALS="auth-key", CHAT_BACKEND="direct")
        backend = create_backend(get_settings())
        assert isinstance(backend, GigaChatClient)

    def test_langchain_backend(self, override_settings):
        override_settings(GIGACHAT_CREDENTIALS="auth-key", CHAT_BACKEND="langchain")
        backend = create_backend(get_settings())
        assert isinstance(backend, LangChainBackend)

    def test_backend_name_case_insensitive(self, override_settings):
        override_settings(GIGACHAT_CREDENTIALS="auth-key", CHAT_BACKEND=" Direct ")
        assert isinstance(create_backend(get_settings()), GigaChatClient)

    def test_unknown_backend_raises(self, override_settings):
        override_settings(GIGACHAT_CREDENTIALS="auth-key", CHAT_BACKEND="openai")
        with pytest.raises(ConfigurationError, match="Unknown chat backend"):
            create_backend(get_settings())

    def test_missing_credentials_raises(self, override_settings):
        override_settings(
            GIGACHAT_CREDENTIALS="",
            GIGACHAT_CLIENT_ID="",
            GIGACHAT_CLIENT_SECRET="",
            CHAT_BACKEND="direct",
        )
        with pytest.raises(ConfigurationError):
            create_backend(get_settings())

    def test_settings_flow_into_config(self, override_settings):
        override_settings(
            GIGACHAT_CLIENT_ID="id",
            GIGACHAT_CLIENT_SECRET="secret",
            GIGACHAT_CREDENTIALS="",
            GIGACHAT_MODEL="GigaChat-Pro",
            GIGACHAT_TEMPERATURE="0.3",
            CHAT_BACKEND="direct",
        )
        config = create_backend(get_settings()).get_config()
        assert config.model == "GigaChat-Pro"
        assert config.temperature == 0.3

    def test_each_call_builds_fresh_instance(self, override_settings):
        override_settings(GIGACHAT_CREDENTIALS="auth-key", CHAT_BACKEND="direct")
        assert create_backend(get_settings()) is not create_backend(get_settings())
