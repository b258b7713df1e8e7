"""JSON 文档读写 -- 在 KeyValueStore 之上做序列化

读取失败（缺失 / 损坏）时静默回退到调用方给出的 fallback，仅记录 warning。
"""

import json
from typing import Any

import structlog

from .protocols import KeyValueStore

log = structlog.get_logger()


async def load_json(store: KeyValueStore, key: str, fallback: Any) -> Any:
    """读取并解析 key 对应的 JSON 文档

    Args:
        store: key/value 存储
        key: 持久化键
        fallback: 缺失或解析失败时的返回值

    Returns:
        解析后的 Python 对象，或 fallback
    """
    raw = await store.get(key)
    if raw is None or raw == "":
        return fallback
    try:
        return json.loads(raw)
    except ValueError as e:
        log.warning("stored_document_corrupt", key=key, error=str(e))
        return fallback


async def save_json(store: KeyValueStore, key: str, value: Any) -> None:
    """序列化并写入 key"""
    await store.set(key, json.dumps(value, ensure_ascii=False))
