"""KeyValueStore 内存实现 -- 测试与临时会话使用"""


class MemoryKeyValueStore:
    """进程内 dict 实现，不落盘"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self) -> list[str]:
        return sorted(self._data)

    async def close(self) -> None:
        return None
