"""apps/gateway 测试配置 -- 手动装配 app.state（绕过 lifespan）+ httpx AsyncClient"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pmcopilot.core.guided import GuidedSessions
from pmcopilot.core.store import create_store
from pmcopilot.core.workspace import open_workspace
from pmcopilot.gateway.services.llm_service import LLMService
from pmcopilot.gateway.services.sse_hub import SSEHub
from pmcopilot.provider import AssistantBridge, AssistantSession, ChatEndpointClient

BASE_URL = "http://test"


@pytest_asyncio.fixture
async def gateway_tmp_dir(tmp_path: Path) -> Path:
    """Gateway 临时数据目录"""
    db_dir = tmp_path / "sqlite"
    db_dir.mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest_asyncio.fixture
async def app(gateway_tmp_dir: Path):
    """创建测试用 FastAPI app：SQLite 存储 + offline LLM + 进程内 /api/chat"""
    db_path = gateway_tmp_dir / "sqlite" / "test.db"
    os.environ["PMCOPILOT_DB_PATH"] = str(db_path)
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from pmcopilot.gateway.main import create_app

    application = create_app()

    store = await create_store(str(db_path))
    workspace = await open_workspace(store)
    sse_hub = SSEHub()
    workspace.subscribe(sse_hub)

    application.state.store = store
    application.state.workspace = workspace
    application.state.sse_hub = sse_hub
    application.state.guided_sessions = GuidedSessions()
    application.state.llm_service = LLMService()
    application.state.assistant_session = AssistantSession(
        AssistantBridge(
            ChatEndpointClient(
                endpoint_url=f"{BASE_URL}/api/chat",
                transport=ASGITransport(app=application),
            )
        )
    )

    yield application

    await store.close()
    for key in ["PMCOPILOT_DB_PATH", "LOGFIRE_SEND_TO_LOGFIRE"]:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=BASE_URL,
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def project_id(client: AsyncClient) -> str:
    """已创建并选中的项目 ID"""
    resp = await client.post("/api/projects")
    return resp.json()["id"]
