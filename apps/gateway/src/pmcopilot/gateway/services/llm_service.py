"""LLMService -- /api/chat 服务端应答

litellm 模式：system + user 指令经 LiteLLMClient 调用 gpt-4o-mini。
offline 模式：不访问外部服务，直接返回关键词建议（本地开发 / 无 key 时使用）。
失败原样抛出，由路由层记录并转换为通用 500 应答。
"""

import structlog
from pmcopilot.provider import (
    ChatRequest,
    LiteLLMClient,
    ModelCallResult,
    OfflineResponder,
    build_messages,
)
from pmcopilot.provider.config import DEFAULT_TEMPERATURE

log = structlog.get_logger()


class LLMService:
    """服务端 AI 应答"""

    def __init__(
        self,
        client: LiteLLMClient | None = None,
        offline: OfflineResponder | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        """
        Args:
            client: LiteLLM 客户端；None 表示 offline 模式
            offline: 离线应答器
            temperature: 采样温度
        """
        self._client = client
        self._offline = offline or OfflineResponder()
        self._temperature = temperature

    @property
    def mode(self) -> str:
        return "litellm" if self._client is not None else "offline"

    async def call(self, request: ChatRequest) -> ModelCallResult:
        """生成一次应答

        Raises:
            ProviderError: LLM 调用失败
        """
        if self._client is None:
            return await self._offline.ask(request)
        return await self._client.complete(
            build_messages(request),
            temperature=self._temperature,
        )

    async def reply(self, request: ChatRequest) -> str:
        result = await self.call(request)
        return result.content
