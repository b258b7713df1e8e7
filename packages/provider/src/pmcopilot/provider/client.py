"""LiteLLMClient -- LLM provider 调用封装

通过 litellm.acompletion() 调用 chat completion，只在 /api/chat 服务端使用。
"""

import time

import httpx
import structlog
from litellm import acompletion

from .exceptions import ProviderError, ProviderUnreachableError
from .models import ModelCallResult, TokenUsage
from .prompts import NO_REPLY

log = structlog.get_logger()

# 连接类异常类型集合
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.TimeoutException,
)


def _is_connection_error(e: Exception) -> bool:
    """判断异常是否为连接类错误（provider 不可达）"""
    if isinstance(e, _CONNECTION_ERROR_TYPES):
        return True
    # LiteLLM 的 APIConnectionError / Timeout 也属于连接类错误
    error_name = type(e).__name__
    return error_name in ("APIConnectionError", "APITimeoutError", "Timeout")


def _parse_usage(response) -> TokenUsage:
    usage = getattr(response, "usage", None)
    if usage is None:
        return TokenUsage()
    try:
        return TokenUsage(
            prompt_tokens=int(getattr(usage, "prompt_tokens", 0) or 0),
            completion_tokens=int(getattr(usage, "completion_tokens", 0) or 0),
            total_tokens=int(getattr(usage, "total_tokens", 0) or 0),
        )
    except (TypeError, ValueError):
        return TokenUsage()


class LiteLLMClient:
    """LiteLLM 客户端"""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        api_base: str = "",
        timeout_s: int = 30,
    ) -> None:
        """
        Args:
            model: 模型名
            api_key: provider API key，空表示交给 litellm 读取环境变量
            api_base: 自定义 API base，空表示 provider 默认
            timeout_s: 请求超时（秒）
        """
        self._model = model
        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self._timeout_s = timeout_s

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.3,
        **kwargs,
    ) -> ModelCallResult:
        """发送 chat completion 请求

        Args:
            messages: 消息列表，格式 [{"role": "user", "content": "..."}]
            temperature: 采样温度
            **kwargs: 其他 LiteLLM 支持的参数

        Returns:
            ModelCallResult；provider 没有返回内容时 content 为 "(no reply)"

        Raises:
            ProviderUnreachableError: 连接失败或超时
            ProviderError: provider 返回错误（如模型不可用、配额耗尽）
        """
        start_time = time.monotonic()

        try:
            call_kwargs = {
                "model": self._model,
                "messages": messages,
                "temperature": temperature,
                "timeout": self._timeout_s,
                **kwargs,
            }
            if self._api_key:
                call_kwargs["api_key"] = self._api_key
            if self._api_base:
                call_kwargs["api_base"] = self._api_base

            log.debug(
                "litellm_call_start",
                model=self._model,
                message_count=len(messages),
            )

            response = await acompletion(**call_kwargs)

            duration_ms = int((time.monotonic() - start_time) * 1000)

            content = ""
            if response.choices:
                content = response.choices[0].message.content or ""

            result = ModelCallResult(
                content=content or NO_REPLY,
                model_name=getattr(response, "model", None) or self._model,
                provider="litellm",
                duration_ms=duration_ms,
                token_usage=_parse_usage(response),
            )

            log.info(
                "litellm_call_completed",
                model=result.model_name,
                duration_ms=duration_ms,
                total_tokens=result.token_usage.total_tokens,
            )

            return result

        except (ProviderUnreachableError, ProviderError):
            raise
        except Exception as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            log.error(
                "litellm_call_failed",
                model=self._model,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
            )
            if _is_connection_error(e):
                raise ProviderUnreachableError(
                    provider_url=self._api_base or self._model,
                    original_error=e,
                ) from e
            raise ProviderError(
                message=f"LLM 调用失败: {e}",
                recoverable=False,
            ) from e
