"""packages/core 测试配置 -- 核心层 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from pmcopilot.core.models import Project, Risk, Task
from pmcopilot.core.store import MemoryKeyValueStore, SqliteKeyValueStore


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def core_db(core_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """核心层已初始化数据库连接"""
    from pmcopilot.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(core_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def sqlite_store(core_db: aiosqlite.Connection) -> SqliteKeyValueStore:
    """基于 core_db 的 SQLite key/value 存储（连接由 core_db 关闭）"""
    return SqliteKeyValueStore(core_db)


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def launch_project() -> Project:
    """已填写名称与目标的项目"""
    return Project(name="Launch", goals="Ship v1")


@pytest.fixture
def full_project() -> Project:
    """引导 8 步全部满足条件的项目"""
    return Project(
        name="Launch",
        goals="Ship v1",
        start="2024-05-01",
        end="2024-06-30",
        stakeholders=["Owner"],
        tasks=[Task(title="Kickoff")],
        risks=[Risk(title="Vendor delay")],
        standups=[],
    )
