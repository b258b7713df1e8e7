"""Provider 异常体系"""


class ProviderError(Exception):
    """Provider 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过降级恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class ProviderUnreachableError(ProviderError):
    """LLM provider 不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, provider_url: str, original_error: Exception) -> None:
        super().__init__(
            f"LLM provider 不可达: {provider_url} -- {original_error}",
            recoverable=True,
        )
        self.provider_url = provider_url
        self.original_error = original_error


class BridgeTransportError(ProviderError):
    """/api/chat 调用失败（超时、网络错误、非成功状态码、响应无法解析）

    此异常触发 FallbackManager 降级到离线应答。
    """

    def __init__(
        self,
        endpoint_url: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"chat endpoint 调用失败: {endpoint_url} -- {reason}",
            recoverable=True,
        )
        self.endpoint_url = endpoint_url
        self.reason = reason
        self.status_code = status_code
