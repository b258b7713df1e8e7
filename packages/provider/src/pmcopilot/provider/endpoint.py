"""ChatEndpointClient -- 客户端侧访问 /api/chat

单次 POST，超过固定时限即放弃。任何失败都包装为 BridgeTransportError，
交给 FallbackManager 降级到离线应答。
"""

import asyncio
import time

import httpx
import structlog

from .config import BRIDGE_TIMEOUT_S
from .exceptions import BridgeTransportError
from .models import ChatRequest, ModelCallResult
from .prompts import NO_REPLY

log = structlog.get_logger()


class ChatEndpointClient:
    """/api/chat HTTP 客户端"""

    def __init__(
        self,
        endpoint_url: str,
        timeout_s: float = BRIDGE_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            endpoint_url: /api/chat 完整 URL
            timeout_s: 整个请求（连接 + 读取）的时间上限
            transport: 自定义 httpx transport（测试或进程内调用）
        """
        self._endpoint_url = endpoint_url
        self._timeout_s = timeout_s
        self._transport = transport

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    async def ask(self, request: ChatRequest) -> ModelCallResult:
        """发送请求并返回 reply

        Returns:
            ModelCallResult；reply 缺失或为空时 content 为 "(no reply)"

        Raises:
            BridgeTransportError: 超时、网络错误、非 2xx 状态码或响应无法解析
        """
        start_time = time.monotonic()
        try:
            async with asyncio.timeout(self._timeout_s):
                async with httpx.AsyncClient(
                    timeout=self._timeout_s,
                    transport=self._transport,
                ) as client:
                    resp = await client.post(
                        self._endpoint_url,
                        json=request.model_dump(mode="json"),
                    )
        except TimeoutError as e:
            raise BridgeTransportError(self._endpoint_url, "timeout") from e
        except httpx.HTTPError as e:
            raise BridgeTransportError(
                self._endpoint_url, f"{type(e).__name__}: {e}"
            ) from e

        if not resp.is_success:
            raise BridgeTransportError(
                self._endpoint_url,
                f"bad status {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise BridgeTransportError(
                self._endpoint_url,
                "response is not JSON",
                status_code=resp.status_code,
            ) from e

        reply = data.get("reply") if isinstance(data, dict) else None
        content = reply if isinstance(reply, str) and reply else NO_REPLY
        duration_ms = int((time.monotonic() - start_time) * 1000)

        log.debug(
            "chat_endpoint_replied",
            endpoint=self._endpoint_url,
            duration_ms=duration_ms,
        )
        return ModelCallResult(
            content=content,
            provider="endpoint",
            duration_ms=duration_ms,
        )
