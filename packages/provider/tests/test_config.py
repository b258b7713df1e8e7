"""ProviderConfig / BridgeConfig 单元测试

验证环境变量映射、默认值、非法值回退。
"""

import pytest
from pmcopilot.provider.config import (
    BridgeConfig,
    ProviderConfig,
    load_bridge_config,
    load_provider_config,
)
from pydantic import ValidationError


class TestProviderConfig:
    def test_default_values(self):
        config = ProviderConfig()
        assert config.api_key.get_secret_value() == ""
        assert config.llm_mode == "litellm"
        assert config.model == "gpt-4o-mini"
        assert config.temperature == 0.3
        assert config.timeout_s == 30

    def test_timeout_min_value(self):
        with pytest.raises(ValidationError):
            ProviderConfig(timeout_s=0)

    def test_invalid_mode(self):
        with pytest.raises(ValidationError):
            ProviderConfig(llm_mode="echo")


class TestLoadProviderConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("PMCOPILOT_LLM_MODE", "offline")
        monkeypatch.setenv("PMCOPILOT_LLM_MODEL", "gpt-4o")
        monkeypatch.setenv("PMCOPILOT_LLM_API_BASE", "http://proxy:4000")
        monkeypatch.setenv("PMCOPILOT_LLM_TIMEOUT_S", "12")

        config = load_provider_config()

        assert config.api_key.get_secret_value() == "sk-env"
        assert config.llm_mode == "offline"
        assert config.model == "gpt-4o"
        assert config.api_base == "http://proxy:4000"
        assert config.timeout_s == 12

    def test_invalid_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv("PMCOPILOT_LLM_TIMEOUT_S", "abc")
        assert load_provider_config().timeout_s == 30

    def test_defaults_without_env(self, monkeypatch):
        for var in (
            "OPENAI_API_KEY",
            "PMCOPILOT_LLM_MODE",
            "PMCOPILOT_LLM_MODEL",
            "PMCOPILOT_LLM_API_BASE",
            "PMCOPILOT_LLM_TIMEOUT_S",
        ):
            monkeypatch.delenv(var, raising=False)
        config = load_provider_config()
        assert config.llm_mode == "litellm"
        assert config.api_key.get_secret_value() == ""

    def test_secret_not_in_repr(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-very-secret")
        assert "sk-very-secret" not in repr(load_provider_config())


class TestBridgeConfig:
    def test_fixed_timeout(self, monkeypatch):
        monkeypatch.delenv("PMCOPILOT_CHAT_ENDPOINT", raising=False)
        config = load_bridge_config()
        assert config.timeout_s == 9.0
        assert config.endpoint_url.endswith("/api/chat")

    def test_endpoint_from_env(self, monkeypatch):
        monkeypatch.setenv("PMCOPILOT_CHAT_ENDPOINT", "http://example.test/api/chat")
        assert load_bridge_config().endpoint_url == "http://example.test/api/chat"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            BridgeConfig(timeout_s=0)
