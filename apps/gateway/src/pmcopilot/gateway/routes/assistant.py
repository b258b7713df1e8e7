"""AI 助手路由

POST /api/assistant/messages: 以当前项目快照 + Knowledge 为上下文发送消息
GET  /api/assistant/transcript: 可见的对话记录
"""

from fastapi import APIRouter, Depends
from pmcopilot.core.workspace import Workspace
from pmcopilot.provider import AssistantSession, TranscriptEntry
from pydantic import BaseModel, Field

from ..deps import get_assistant_session, get_workspace

router = APIRouter()


class AssistantMessageRequest(BaseModel):
    message: str = Field(default="", description="用户消息")


class AssistantMessageResponse(BaseModel):
    """发送结果

    reply 为 None 表示消息为空白，或该请求已被更新的发送取代。
    """

    reply: TranscriptEntry | None


class TranscriptResponse(BaseModel):
    messages: list[TranscriptEntry]


@router.post("/api/assistant/messages", response_model=AssistantMessageResponse)
async def send_message(
    body: AssistantMessageRequest,
    workspace: Workspace = Depends(get_workspace),
    session: AssistantSession = Depends(get_assistant_session),
):
    entry = await session.send(
        body.message,
        context=workspace.assistant_context(),
        knowledge=workspace.knowledge,
    )
    return AssistantMessageResponse(reply=entry)


@router.get("/api/assistant/transcript", response_model=TranscriptResponse)
async def get_transcript(session: AssistantSession = Depends(get_assistant_session)):
    return TranscriptResponse(messages=session.transcript)
