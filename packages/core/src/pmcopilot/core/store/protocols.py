"""Store Protocol 接口定义

key/value 存储抽象：值是已序列化的 JSON 文本，由调用方负责编解码。
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """key/value 存储接口"""

    async def get(self, key: str) -> str | None:
        """读取 key 对应的原始文本，不存在时返回 None"""
        ...

    async def set(self, key: str, value: str) -> None:
        """写入 key（覆盖）"""
        ...

    async def delete(self, key: str) -> None:
        """删除 key（不存在时静默）"""
        ...

    async def close(self) -> None:
        """释放底层资源"""
        ...
