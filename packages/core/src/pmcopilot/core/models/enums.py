"""枚举定义 -- Phase / TaskStatus / Level

Phase 是封闭枚举：外部数据中无法识别的阶段值在入口处归入 INITIATION，
分组逻辑永远只看到五个合法值。
"""

from enum import StrEnum


class Phase(StrEnum):
    """项目生命周期阶段（五个固定分组）"""

    INITIATION = "Initiation"
    PLANNING = "Planning"
    EXECUTION = "Execution"
    MONITORING = "Monitoring"
    CLOSURE = "Closure"


# 分组展示顺序
PHASES: tuple[Phase, ...] = (
    Phase.INITIATION,
    Phase.PLANNING,
    Phase.EXECUTION,
    Phase.MONITORING,
    Phase.CLOSURE,
)

DEFAULT_PHASE = Phase.INITIATION


class TaskStatus(StrEnum):
    """任务状态"""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class Level(StrEnum):
    """风险影响度 / 发生概率等级"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def ordinal(self) -> int:
        """序数：Low=1, Medium=2, High=3"""
        return _LEVEL_ORDINALS[self]


_LEVEL_ORDINALS: dict[Level, int] = {
    Level.LOW: 1,
    Level.MEDIUM: 2,
    Level.HIGH: 3,
}


def coerce_phase(value: object) -> Phase:
    """将任意输入归一化为 Phase，无法识别时返回 DEFAULT_PHASE

    Args:
        value: 外部输入（导入文档、API 请求体等）

    Returns:
        合法的 Phase
    """
    if isinstance(value, Phase):
        return value
    try:
        return Phase(str(value))
    except ValueError:
        return DEFAULT_PHASE
