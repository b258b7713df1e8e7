"""集成测试共享 fixture -- 经 lifespan 启动的完整 app"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path, monkeypatch):
    """集成测试用 FastAPI app（offline 模式，/api/chat 端点不可达）"""
    monkeypatch.setenv("PMCOPILOT_DB_PATH", str(tmp_path / "data" / "pmcopilot.db"))
    monkeypatch.setenv("PMCOPILOT_LLM_MODE", "offline")
    # discard 端口，连接会被拒绝
    monkeypatch.setenv("PMCOPILOT_CHAT_ENDPOINT", "http://127.0.0.1:9/api/chat")
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from pmcopilot.gateway.main import create_app

    app = create_app()
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
