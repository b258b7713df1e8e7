"""依赖注入模块 -- 通过 FastAPI Depends 注入应用状态

Workspace / SSEHub / LLMService 等实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from pmcopilot.core.guided import GuidedSessions
from pmcopilot.core.workspace import Workspace
from pmcopilot.provider import AssistantSession

from .services.llm_service import LLMService
from .services.sse_hub import SSEHub


def get_workspace(request: Request) -> Workspace:
    """从 app.state 获取 Workspace 实例"""
    return request.app.state.workspace


def get_guided_sessions(request: Request) -> GuidedSessions:
    return request.app.state.guided_sessions


def get_sse_hub(request: Request) -> SSEHub:
    return request.app.state.sse_hub


def get_llm_service(request: Request) -> LLMService:
    return request.app.state.llm_service


def get_assistant_session(request: Request) -> AssistantSession:
    return request.app.state.assistant_session
