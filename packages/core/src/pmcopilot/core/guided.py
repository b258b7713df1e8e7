"""Guided-Step Engine -- 8 步线性引导

步骤 1..8 线性推进，只能通过 advance/retreat 移动：
- advance: 当前步骤的就绪谓词成立且未到第 8 步时放行
- retreat: 第 1 步以外总是放行
每次打开引导视图都从第 1 步开始（步骤不持久化）。
引擎只读取 Project 快照，不做任何写入。
"""

from collections.abc import Callable
from enum import IntEnum

from pydantic import BaseModel

from .boards import make_template_tasks
from .models import Phase, Project, Task

TOTAL_STEPS = 8

# 第 5 步建议先填写日期的任务数
DATED_TASKS_TARGET = 3


class GuidedStep(IntEnum):
    """引导步骤"""

    NAME_AND_GOALS = 1
    PERIOD = 2
    STAKEHOLDERS = 3
    TASK_TEMPLATES = 4
    TASK_DATES = 5
    RISKS = 6
    STANDUP = 7
    DONE = 8


def _step5_ready(project: Project) -> bool:
    # 放宽：有 3 件带日期的任务，或至少 1 件任务即可
    dated = sum(1 for t in project.tasks if t.has_dates)
    return dated >= DATED_TASKS_TARGET or len(project.tasks) >= 1


STEP_READINESS: dict[GuidedStep, Callable[[Project], bool]] = {
    GuidedStep.NAME_AND_GOALS: lambda p: bool(p.name) and bool(p.goals),
    GuidedStep.PERIOD: lambda p: bool(p.start) and bool(p.end),
    GuidedStep.STAKEHOLDERS: lambda p: len(p.stakeholders) > 0,
    GuidedStep.TASK_TEMPLATES: lambda p: len(p.tasks) > 0,
    GuidedStep.TASK_DATES: _step5_ready,
    GuidedStep.RISKS: lambda p: len(p.risks) > 0,
    GuidedStep.STANDUP: lambda p: len(p.standups) > 0,
    GuidedStep.DONE: lambda p: True,
}


def is_step_ready(step: GuidedStep | int, project: Project) -> bool:
    """判断指定步骤的就绪谓词"""
    return STEP_READINESS[GuidedStep(step)](project)


class StepGuide(BaseModel):
    """步骤说明文案"""

    title: str
    hint: str


STEP_GUIDES: dict[GuidedStep, StepGuide] = {
    GuidedStep.NAME_AND_GOALS: StepGuide(
        title="① 名前と目的を決めましょう",
        hint="「このプロジェクトで何を達成したいか」を1〜2行で。あとから変えてOKです。",
    ),
    GuidedStep.PERIOD: StepGuide(
        title="② 期間を入れましょう",
        hint="開始日と終了日を入れると、進捗の見通しが立ちます。",
    ),
    GuidedStep.STAKEHOLDERS: StepGuide(
        title="③ 関係者（連絡すべき人）を入れましょう",
        hint="例: 発注者A, エンジニアB, デザイナーC",
    ),
    GuidedStep.TASK_TEMPLATES: StepGuide(
        title="④ タスク雛形を一括で入れましょう",
        hint="迷ったらまず雛形でOK。あとで消したり直せます。",
    ),
    GuidedStep.TASK_DATES: StepGuide(
        title="⑤ 期日を入れましょう（まずは3件）",
        hint="開始/終了を入れると、進捗バーが動きます。まずは上から3件だけでOK。",
    ),
    GuidedStep.RISKS: StepGuide(
        title="⑥ リスク（心配ごと）を1つ書きましょう",
        hint="例: 「外部APIの遅延」「要件の追加」など。後で増やしてOK。",
    ),
    GuidedStep.STANDUP: StepGuide(
        title="⑦ 今日の計画を60秒でメモ",
        hint="昨日/今日/ブロッカー（困りごと）を書いて「保存」。これで毎日の習慣ができます。",
    ),
    GuidedStep.DONE: StepGuide(
        title="⑧ 完了！次の使い方",
        hint="「Timeline」で進捗バーを確認、「Risks」で対策を追記、「Stand-up」で毎日の記録。",
    ),
}

# 第 4 步的任务模板
GUIDED_TASK_TEMPLATES: tuple[tuple[str, Phase], ...] = (
    ("Kickoff（キックオフMTG）", Phase.INITIATION),
    ("目的と成功基準の合意", Phase.INITIATION),
    ("WBSのたたき作成", Phase.PLANNING),
    ("スケジュール作成と担当割り当て", Phase.PLANNING),
    ("デイリースタンドアップ開始", Phase.EXECUTION),
    ("週次ステータス報告", Phase.MONITORING),
    ("受け入れテスト・リリース判定", Phase.CLOSURE),
)

# 第 8 步完成后建议切换到的视图
COMPLETION_VIEW = "plan"


def add_guided_templates(project: Project) -> dict:
    """第 4 步：在现有任务之后追加引导模板任务"""
    return {"tasks": [*project.tasks, *make_template_tasks(GUIDED_TASK_TEMPLATES)]}


def tasks_for_dating(project: Project) -> list[Task]:
    """第 5 步：只展示前 3 件任务"""
    return project.tasks[:DATED_TASKS_TARGET]


class GuidedSession:
    """单个项目的引导状态机（内存中，不持久化）"""

    def __init__(self) -> None:
        self._step = GuidedStep.NAME_AND_GOALS

    @property
    def step(self) -> GuidedStep:
        return self._step

    @property
    def is_terminal(self) -> bool:
        return self._step == GuidedStep.DONE

    @property
    def progress_percent(self) -> int:
        # 四舍五入
        return (200 * int(self._step) + TOTAL_STEPS) // (2 * TOTAL_STEPS)

    def reset(self) -> None:
        """打开引导视图时调用，回到第 1 步"""
        self._step = GuidedStep.NAME_AND_GOALS

    def can_advance(self, project: Project) -> bool:
        if self.is_terminal:
            return False
        return is_step_ready(self._step, project)

    def advance(self, project: Project) -> bool:
        """前进一步

        Returns:
            True 如果已前进；谓词不成立或已在第 8 步时返回 False
        """
        if not self.can_advance(project):
            return False
        self._step = GuidedStep(self._step + 1)
        return True

    def retreat(self) -> bool:
        """后退一步；第 1 步时返回 False"""
        if self._step == GuidedStep.NAME_AND_GOALS:
            return False
        self._step = GuidedStep(self._step - 1)
        return True


class GuidedSessions:
    """项目 ID -> GuidedSession 的注册表"""

    def __init__(self) -> None:
        self._sessions: dict[str, GuidedSession] = {}

    def get(self, project_id: str) -> GuidedSession:
        if project_id not in self._sessions:
            self._sessions[project_id] = GuidedSession()
        return self._sessions[project_id]

    def open(self, project_id: str) -> GuidedSession:
        """打开引导视图：总是从第 1 步开始"""
        session = self.get(project_id)
        session.reset()
        return session

    def discard(self, project_id: str) -> None:
        self._sessions.pop(project_id, None)

    def clear(self) -> None:
        """导入整体替换项目集合时丢弃全部引导状态"""
        self._sessions.clear()
