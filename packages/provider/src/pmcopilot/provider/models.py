"""数据模型 -- ChatRequest + TokenUsage + ModelCallResult"""

from typing import Any

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """AI 助手请求体 -- 三个字段均可缺省 / 为 null"""

    message: str | None = Field(default=None, description="用户消息")
    context: dict[str, Any] | None = Field(
        default=None,
        description="当前项目快照（name/goals/stakeholders/tasks/risks）",
    )
    knowledge: str | None = Field(default=None, description="全局 Knowledge 文本")


class TokenUsage(BaseModel):
    """Token 使用统计

    key 命名对齐 OpenAI/LiteLLM 行业标准：
    prompt_tokens / completion_tokens / total_tokens
    """

    prompt_tokens: int = Field(default=0, ge=0, description="输入 token 数")
    completion_tokens: int = Field(default=0, ge=0, description="输出 token 数")
    total_tokens: int = Field(default=0, ge=0, description="总 token 数")


class ModelCallResult(BaseModel):
    """一次应答的结果

    LiteLLM、chat endpoint、离线应答统一返回此类型。
    """

    content: str = Field(description="应答文本")
    model_name: str = Field(default="", description="实际调用的模型名称（如 gpt-4o-mini）")
    provider: str = Field(default="", description="应答来源（openai / endpoint / offline）")
    duration_ms: int = Field(default=0, ge=0, description="端到端耗时（毫秒）")
    token_usage: TokenUsage = Field(
        default_factory=TokenUsage,
        description="Token 使用详情",
    )
    is_fallback: bool = Field(default=False, description="是否为降级应答")
    fallback_reason: str = Field(default="", description="降级原因说明")
