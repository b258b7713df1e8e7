"""Project Domain Model -- Project / Task / Risk / Standup

所有模型都是纯数据。Project 只通过顶层字段整体替换（patch）变更，
Standup 创建后不可变。日期统一为 ISO 日期字符串，未设置时为 ""。
"""

from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ulid import ULID

from .enums import DEFAULT_PHASE, Level, Phase, TaskStatus, coerce_phase


def new_id() -> str:
    """生成本地唯一标识（ULID），碰撞时不重新生成"""
    return str(ULID())


def utc_today() -> date:
    """当天日期（UTC）"""
    return datetime.now(UTC).date()


def _today() -> str:
    return utc_today().isoformat()


def _blank_if_none(value: object) -> object:
    return "" if value is None else value


class Task(BaseModel):
    """任务

    start/due 之间不做先后约束。
    """

    id: str = Field(default_factory=new_id, description="任务 ID")
    title: str = Field(default="", description="任务标题")
    phase: Phase = Field(default=DEFAULT_PHASE, description="所属阶段")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="状态")
    start: str = Field(default="", description="开始日期")
    due: str = Field(default="", description="截止日期")

    @field_validator("phase", mode="before")
    @classmethod
    def _coerce_phase(cls, value: object) -> Phase:
        # 未知阶段在入口处归入 Initiation
        return coerce_phase(value)

    @field_validator("start", "due", mode="before")
    @classmethod
    def _dates(cls, value: object) -> object:
        return _blank_if_none(value)

    @property
    def has_dates(self) -> bool:
        return bool(self.start) and bool(self.due)


class Risk(BaseModel):
    """风险

    score = ordinal(impact) × ordinal(likelihood)，范围 [1, 9]。
    """

    id: str = Field(default_factory=new_id, description="风险 ID")
    title: str = Field(default="", description="风险内容")
    impact: Level = Field(default=Level.MEDIUM, description="影响度")
    likelihood: Level = Field(default=Level.MEDIUM, description="发生概率")
    mitigation: str = Field(default="", description="对策")
    open: bool = Field(default=True, description="是否仍未关闭")

    @property
    def score(self) -> int:
        return self.impact.ordinal * self.likelihood.ordinal


class Standup(BaseModel):
    """站会记录 -- 创建后不可变"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="记录 ID")
    date: str = Field(
        default_factory=_today,
        description="创建日期（不可编辑）",
    )
    yesterday: str = Field(default="", description="昨天做了什么")
    today: str = Field(default="", description="今天做什么")
    blockers: str = Field(default="", description="阻碍")


class Project(BaseModel):
    """项目 -- 只通过顶层字段整体替换变更"""

    id: str = Field(default_factory=new_id, description="项目 ID")
    name: str = Field(default="", description="项目名")
    start: str = Field(default="", description="开始日期")
    end: str = Field(default="", description="结束日期")
    goals: str = Field(default="", description="目的 / 成功标准")
    stakeholders: list[str] = Field(default_factory=list, description="关系者（录入顺序）")
    tasks: list[Task] = Field(default_factory=list, description="任务列表")
    risks: list[Risk] = Field(default_factory=list, description="风险列表")
    standups: list[Standup] = Field(default_factory=list, description="站会记录（新的在前）")

    @field_validator("start", "end", "name", "goals", mode="before")
    @classmethod
    def _strings(cls, value: object) -> object:
        return _blank_if_none(value)

    @field_validator("stakeholders", "tasks", "risks", "standups", mode="before")
    @classmethod
    def _lists(cls, value: object) -> object:
        return [] if value is None else value


# 可通过 patch 替换的顶层字段（id 不可变）
PATCHABLE_FIELDS: frozenset[str] = frozenset(Project.model_fields) - {"id"}
