"""PM Copilot Core Store -- 本地 key/value 持久化

提供工厂函数创建 SQLite key/value 存储。
"""

from pathlib import Path

import aiosqlite

from .documents import load_json, save_json
from .memory_store import MemoryKeyValueStore
from .protocols import KeyValueStore
from .sqlite_init import init_db
from .sqlite_store import SqliteKeyValueStore


async def create_store(db_path: str) -> SqliteKeyValueStore:
    """创建 SQLite key/value 存储

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        SqliteKeyValueStore 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return SqliteKeyValueStore(conn)


__all__ = [
    "KeyValueStore",
    "SqliteKeyValueStore",
    "MemoryKeyValueStore",
    "create_store",
    "init_db",
    "load_json",
    "save_json",
]
