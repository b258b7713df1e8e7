"""Provider 配置加载

从环境变量加载配置。
- ProviderConfig: /api/chat 服务端调用 LLM 的配置
- BridgeConfig: 客户端侧 AI 助手访问 /api/chat 的配置
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

# 服务端固定模型与采样温度
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.3

# 客户端调用 /api/chat 的固定超时（秒）
BRIDGE_TIMEOUT_S = 9.0

DEFAULT_CHAT_ENDPOINT = "http://127.0.0.1:8000/api/chat"


class ProviderConfig(BaseModel):
    """服务端 LLM 配置 -- 从环境变量加载

    环境变量:
        OPENAI_API_KEY: provider API key
        PMCOPILOT_LLM_MODE: 运行模式（litellm / offline）
        PMCOPILOT_LLM_MODEL: 模型名（默认 gpt-4o-mini）
        PMCOPILOT_LLM_API_BASE: 自定义 API base（可选）
        PMCOPILOT_LLM_TIMEOUT_S: 调用超时（秒，默认 30）
    """

    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="LLM provider API key",
    )
    llm_mode: Literal["litellm", "offline"] = Field(
        default="litellm",
        description="LLM 运行模式：litellm / offline",
    )
    model: str = Field(default=DEFAULT_MODEL, description="模型名")
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        ge=0.0,
        le=2.0,
        description="采样温度",
    )
    api_base: str = Field(default="", description="自定义 API base，空表示 provider 默认")
    timeout_s: int = Field(
        default=30,
        ge=1,
        description="LLM 调用超时（秒）",
    )


def load_provider_config() -> ProviderConfig:
    """从环境变量加载 Provider 配置

    Returns:
        ProviderConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("OPENAI_API_KEY"):
        kwargs["api_key"] = SecretStr(val)

    if val := os.environ.get("PMCOPILOT_LLM_MODE"):
        kwargs["llm_mode"] = val

    if val := os.environ.get("PMCOPILOT_LLM_MODEL"):
        kwargs["model"] = val

    if val := os.environ.get("PMCOPILOT_LLM_API_BASE"):
        kwargs["api_base"] = val

    if val := os.environ.get("PMCOPILOT_LLM_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="PMCOPILOT_LLM_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return ProviderConfig(**kwargs)


class BridgeConfig(BaseModel):
    """AI 助手客户端配置

    环境变量:
        PMCOPILOT_CHAT_ENDPOINT: /api/chat 的完整 URL
    """

    endpoint_url: str = Field(
        default=DEFAULT_CHAT_ENDPOINT,
        description="/api/chat 完整 URL",
    )
    timeout_s: float = Field(
        default=BRIDGE_TIMEOUT_S,
        gt=0,
        description="单次请求上限（秒），超时即降级到离线应答",
    )


def load_bridge_config() -> BridgeConfig:
    """从环境变量加载 AI 助手客户端配置（超时固定为 9 秒）"""
    kwargs: dict = {}
    if val := os.environ.get("PMCOPILOT_CHAT_ENDPOINT"):
        kwargs["endpoint_url"] = val
    return BridgeConfig(**kwargs)
