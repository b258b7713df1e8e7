"""/api/chat 的 prompt 模板与固定文案"""

import json

from .models import ChatRequest

SYSTEM_PROMPT = " ".join(
    [
        "あなたは初心者PMを支援する日本語アシスタントです。",
        "用語はやさしく、手順は箇条書きで、具体例も添えて説明します。",
        "提供された Knowledge を優先して参照し、不足は断言せず質問します。",
    ]
)

# provider 没有返回内容时的占位
NO_REPLY = "(no reply)"

# 服务端内部错误时返回给客户端的固定文案
SERVER_ERROR_REPLY = "（サーバーエラー）AI応答に失敗しました。"


def build_user_prompt(request: ChatRequest) -> str:
    """把 message / context / knowledge 拼成 user 指令"""
    context = json.dumps(
        request.context if request.context is not None else {},
        ensure_ascii=False,
        indent=2,
    )
    knowledge = request.knowledge if request.knowledge is not None else "(none)"
    return "\n\n".join(
        [
            f"User message: {request.message or ''}",
            f"Context (project): {context}",
            f"Knowledge:\n{knowledge}",
        ]
    )


def build_messages(request: ChatRequest) -> list[dict[str, str]]:
    """构建 chat completion messages"""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(request)},
    ]
