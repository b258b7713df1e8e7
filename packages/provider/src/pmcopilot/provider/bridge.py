"""Assistant Bridge -- UI 与 /api/chat 之间的边界

AssistantBridge.ask() 把 {message, context, knowledge} 发到 /api/chat，
任何失败都降级到 OfflineResponder，永远返回字符串、不抛异常。

AssistantSession 维护可见的对话记录，每次发送是一个以 request_id
为键的 asyncio task。策略为 last-send-wins：新的发送会取消仍在进行中的
旧请求，被取消请求的应答不会写入对话记录。
"""

import asyncio
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field
from ulid import ULID

from .endpoint import ChatEndpointClient
from .exceptions import ProviderError
from .fallback import FallbackManager
from .models import ChatRequest, ModelCallResult
from .offline import OfflineResponder

log = structlog.get_logger()


class AssistantBridge:
    """AI 助手边界组件"""

    def __init__(
        self,
        endpoint: ChatEndpointClient,
        offline: OfflineResponder | None = None,
    ) -> None:
        self._offline = offline or OfflineResponder()
        self._fallback_manager = FallbackManager(
            primary=endpoint,
            fallback=self._offline,
        )

    async def ask_result(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        knowledge: str | None = None,
    ) -> ModelCallResult:
        """发送一次请求，返回带降级标记的结果"""
        request = ChatRequest(message=message, context=context, knowledge=knowledge)
        try:
            return await self._fallback_manager.call_with_fallback(request)
        except ProviderError as e:
            log.error("assistant_bridge_degraded", error=str(e))
            return ModelCallResult(
                content=self._offline.reply(message),
                provider="offline",
                is_fallback=True,
                fallback_reason=str(e),
            )

    async def ask(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        knowledge: str | None = None,
    ) -> str:
        """发送一次请求，返回应答文本"""
        result = await self.ask_result(message, context, knowledge)
        return result.content


class TranscriptEntry(BaseModel):
    """对话记录中的一条消息"""

    role: Literal["user", "assistant"]
    text: str
    request_id: str
    is_fallback: bool = Field(default=False, description="是否为离线降级应答")


class AssistantSession:
    """对话记录 + 在途请求管理"""

    def __init__(self, bridge: AssistantBridge) -> None:
        self._bridge = bridge
        self._transcript: list[TranscriptEntry] = []
        self._inflight: dict[str, asyncio.Task] = {}

    @property
    def transcript(self) -> list[TranscriptEntry]:
        return list(self._transcript)

    async def send(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        knowledge: str | None = None,
    ) -> TranscriptEntry | None:
        """发送消息并等待应答

        Returns:
            写入对话记录的 assistant 条目；消息为空白，或请求被更新的
            发送取代时返回 None
        """
        text = message.strip()
        if not text:
            return None

        request_id = str(ULID())
        self._transcript.append(
            TranscriptEntry(role="user", text=text, request_id=request_id)
        )

        # last-send-wins：取消仍在进行中的旧请求
        for stale_id, stale in list(self._inflight.items()):
            stale.cancel()
            log.info("assistant_request_superseded", request_id=stale_id, by=request_id)

        task = asyncio.create_task(self._bridge.ask_result(text, context, knowledge))
        self._inflight[request_id] = task
        try:
            await asyncio.wait({task})
        finally:
            self._inflight.pop(request_id, None)
            # 调用方自身被取消时，不留下无人等待的请求
            if not task.done():
                task.cancel()

        if task.cancelled():
            return None

        result = task.result()
        entry = TranscriptEntry(
            role="assistant",
            text=result.content,
            request_id=request_id,
            is_fallback=result.is_fallback,
        )
        self._transcript.append(entry)
        return entry
