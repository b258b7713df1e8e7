"""KeyValueStore SQLite 实现

每次 set() 单独提交，写入完成后才返回。
"""

from datetime import UTC, datetime

import aiosqlite


class SqliteKeyValueStore:
    """KeyValueStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn

    async def get(self, key: str) -> str | None:
        cursor = await self.conn.execute(
            "SELECT value FROM kv WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return row[0]

    async def set(self, key: str, value: str) -> None:
        try:
            await self.conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )
            await self.conn.commit()
        except Exception:
            await self.conn.rollback()
            raise

    async def delete(self, key: str) -> None:
        await self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        await self.conn.commit()

    async def keys(self) -> list[str]:
        """列出全部 key（按字母序）"""
        cursor = await self.conn.execute("SELECT key FROM kv ORDER BY key")
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def close(self) -> None:
        await self.conn.close()
