"""配置常量模块 -- 可通过环境变量覆盖

包含本地存储路径、持久化键名、导出格式版本、SSE 心跳间隔等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取本地 data 基础目录"""
    return Path(os.environ.get("PMCOPILOT_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取本地 key/value SQLite 文件路径"""
    return os.environ.get(
        "PMCOPILOT_DB_PATH",
        str(_get_base_dir() / "pmcopilot.db"),
    )


# 三个独立持久化键（项目列表 / 当前选中项目 / 全局 Knowledge）
PROJECTS_KEY = "pmc_projects"
ACTIVE_KEY = "pmc_active"
KNOWLEDGE_KEY = "pmc_knowledge"

# 导出文档格式版本
EXPORT_FORMAT_VERSION: int = 1

# 导出文件名前缀（pm-copilot-YYYY-MM-DD.json）
EXPORT_FILENAME_PREFIX = "pm-copilot"

# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("PMCOPILOT_SSE_HEARTBEAT_INTERVAL", "15")
)
