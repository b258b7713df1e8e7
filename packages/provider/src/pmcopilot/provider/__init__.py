"""PM Copilot Provider -- AI 助手调用抽象层

packages/provider 的公开接口导出。
"""

# 核心组件
from .bridge import AssistantBridge, AssistantSession, TranscriptEntry
from .client import LiteLLMClient

# 配置
from .config import BridgeConfig, ProviderConfig, load_bridge_config, load_provider_config
from .endpoint import ChatEndpointClient

# 异常
from .exceptions import BridgeTransportError, ProviderError, ProviderUnreachableError
from .fallback import FallbackManager

# 数据模型
from .models import ChatRequest, ModelCallResult, TokenUsage
from .offline import OfflineResponder
from .prompts import NO_REPLY, SERVER_ERROR_REPLY, SYSTEM_PROMPT, build_messages

__all__ = [
    "ChatRequest",
    "ModelCallResult",
    "TokenUsage",
    "AssistantBridge",
    "AssistantSession",
    "TranscriptEntry",
    "ChatEndpointClient",
    "LiteLLMClient",
    "OfflineResponder",
    "FallbackManager",
    "BridgeConfig",
    "ProviderConfig",
    "load_bridge_config",
    "load_provider_config",
    "NO_REPLY",
    "SERVER_ERROR_REPLY",
    "SYSTEM_PROMPT",
    "build_messages",
    "ProviderError",
    "ProviderUnreachableError",
    "BridgeTransportError",
]
