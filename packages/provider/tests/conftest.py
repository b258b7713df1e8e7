"""Provider 包测试 fixtures"""

import httpx
import pytest
from pmcopilot.provider.models import ChatRequest


@pytest.fixture
def chat_request() -> ChatRequest:
    """带项目上下文与 Knowledge 的标准请求"""
    return ChatRequest(
        message="リスクの洗い出し方は？",
        context={"name": "Launch", "goals": "Ship v1", "stakeholders": ["Owner"]},
        knowledge="社内ルール: 週次で報告",
    )


def reply_transport(reply: object, status_code: int = 200) -> httpx.MockTransport:
    """返回固定 {reply} 的 mock transport"""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"reply": reply})

    return httpx.MockTransport(handler)


@pytest.fixture
def make_reply_transport():
    return reply_transport
