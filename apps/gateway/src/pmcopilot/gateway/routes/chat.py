"""AI 应答路由

POST /api/chat: 接收 {message, context, knowledge}，返回 {reply}。
- 200: {reply}，模型无内容时为 "(no reply)"
- 500: {reply: 通用错误文案}，详细错误只写日志
其他方法一律 405 {error: "Method Not Allowed"}。
"""

import json

import structlog
from fastapi import APIRouter, Depends, Request
from pmcopilot.provider import SERVER_ERROR_REPLY, ChatRequest
from pydantic import ValidationError
from starlette.responses import JSONResponse

from ..deps import get_llm_service
from ..services.llm_service import LLMService

log = structlog.get_logger()

router = APIRouter()


async def _read_chat_request(request: Request) -> ChatRequest:
    """宽松解析请求体：空体或非法 JSON 按 {} 处理"""
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    try:
        return ChatRequest.model_validate(data)
    except ValidationError:
        log.warning("chat_request_malformed", fields=sorted(data))
        return ChatRequest(
            message=data.get("message") if isinstance(data.get("message"), str) else None,
        )


@router.post("/api/chat")
async def chat(
    request: Request,
    llm_service: LLMService = Depends(get_llm_service),
):
    """生成 AI 应答"""
    chat_request = await _read_chat_request(request)
    try:
        reply = await llm_service.reply(chat_request)
    except Exception as e:
        log.error(
            "chat_reply_failed",
            error=str(e),
            error_type=type(e).__name__,
            mode=llm_service.mode,
        )
        return JSONResponse(status_code=500, content={"reply": SERVER_ERROR_REPLY})

    return {"reply": reply}


@router.api_route(
    "/api/chat",
    methods=["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
async def chat_method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})
