"""PM Copilot Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .document import ExportDocument
from .enums import (
    DEFAULT_PHASE,
    PHASES,
    Level,
    Phase,
    TaskStatus,
    coerce_phase,
)
from .project import PATCHABLE_FIELDS, Project, Risk, Standup, Task, new_id, utc_today

__all__ = [
    # 枚举
    "Phase",
    "PHASES",
    "DEFAULT_PHASE",
    "TaskStatus",
    "Level",
    "coerce_phase",
    # Project
    "Project",
    "Task",
    "Risk",
    "Standup",
    "PATCHABLE_FIELDS",
    "new_id",
    "utc_today",
    # 导出文档
    "ExportDocument",
]
