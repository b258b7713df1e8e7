"""FastAPI 应用主文件

app 创建 + lifespan 管理：本地存储初始化/关闭 + Workspace 加载 +
LLM / AI 助手组件初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from pmcopilot.core.config import get_db_path
from pmcopilot.core.guided import GuidedSessions
from pmcopilot.core.store import create_store
from pmcopilot.core.workspace import open_workspace
from pmcopilot.provider import (
    AssistantBridge,
    AssistantSession,
    ChatEndpointClient,
    LiteLLMClient,
    OfflineResponder,
    load_bridge_config,
    load_provider_config,
)

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import assistant, boards, chat, guided, health, projects, stream, transfer
from .services.llm_service import LLMService
from .services.sse_hub import SSEHub

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时加载 Workspace 与 LLM 组件，关闭时清理连接"""
    # 启动：初始化 Store 并加载 Workspace（持久化订阅者先于 SSE 订阅者）
    store = await create_store(get_db_path())
    app.state.store = store
    workspace = await open_workspace(store)
    app.state.workspace = workspace

    sse_hub = SSEHub()
    workspace.subscribe(sse_hub)
    app.state.sse_hub = sse_hub

    app.state.guided_sessions = GuidedSessions()

    # /api/chat 服务端（根据配置选择模式）
    provider_config = load_provider_config()
    app.state.provider_config = provider_config
    offline = OfflineResponder()

    if provider_config.llm_mode == "litellm":
        litellm_client = LiteLLMClient(
            model=provider_config.model,
            api_key=provider_config.api_key.get_secret_value(),
            api_base=provider_config.api_base,
            timeout_s=provider_config.timeout_s,
        )
        llm_service = LLMService(
            client=litellm_client,
            offline=offline,
            temperature=provider_config.temperature,
        )
        log.info(
            "llm_service_initialized",
            mode="litellm",
            model=provider_config.model,
            timeout_s=provider_config.timeout_s,
        )
    else:
        llm_service = LLMService(client=None, offline=offline)
        log.info("llm_service_initialized", mode="offline")

    app.state.llm_service = llm_service

    # AI 助手：访问 /api/chat，失败时降级到离线应答
    bridge_config = load_bridge_config()
    bridge = AssistantBridge(
        endpoint=ChatEndpointClient(
            endpoint_url=bridge_config.endpoint_url,
            timeout_s=bridge_config.timeout_s,
        ),
        offline=offline,
    )
    app.state.assistant_session = AssistantSession(bridge)
    log.info("assistant_bridge_initialized", endpoint_url=bridge_config.endpoint_url)

    yield

    # 关闭：清理订阅与存储连接
    workspace.unsubscribe(sse_hub)
    if getattr(app.state, "store", None) is not None:
        await app.state.store.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="PM Copilot Gateway",
        version="0.1.0",
        description="PM Copilot 本地项目管理助手 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire()

    app.include_router(chat.router, tags=["chat"])
    app.include_router(projects.router, tags=["projects"])
    app.include_router(guided.router, tags=["guided"])
    app.include_router(boards.router, tags=["boards"])
    app.include_router(transfer.router, tags=["transfer"])
    app.include_router(assistant.router, tags=["assistant"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])

    # 挂载前端静态文件（frontend/dist/ -> /），在所有 API 路由之后
    gateway_root = Path(__file__).resolve().parent
    frontend_dist = gateway_root.parents[4] / "frontend" / "dist"
    if frontend_dist.exists():
        app.mount("/", StaticFiles(directory=str(frontend_dist), html=True), name="frontend")

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
