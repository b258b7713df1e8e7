"""Board Views -- Planning / Timeline / Risk / Stand-up 派生视图与 patch 构造

全部为纯函数：输入当前 Project（以及临时输入），输出派生视图或
交给 Workspace.patch_project 的字段 patch。本模块不持有任何状态。
"""

from collections.abc import Sequence
from datetime import date
from typing import Any

from .models import (
    PHASES,
    Level,
    Phase,
    Project,
    Risk,
    Standup,
    Task,
    TaskStatus,
    utc_today,
)

# Planning 面板的任务模板
PLANNING_TASK_TEMPLATES: tuple[tuple[str, Phase], ...] = (
    ("Kickoff meeting", Phase.INITIATION),
    ("Define scope & success criteria", Phase.INITIATION),
    ("Create WBS & estimates", Phase.PLANNING),
    ("Build schedule & assign owners", Phase.PLANNING),
    ("Stand-ups begin", Phase.EXECUTION),
    ("Weekly status report", Phase.MONITORING),
    ("UAT & acceptance", Phase.CLOSURE),
)

# Risk 面板 "例を入れる" 的示例风险
EXAMPLE_RISKS: tuple[tuple[str, Level, Level], ...] = (
    ("Scope creep without change control", Level.HIGH, Level.MEDIUM),
    ("Key dependency delay (vendor/API)", Level.MEDIUM, Level.MEDIUM),
    ("Single-point-of-failure on staff", Level.HIGH, Level.LOW),
)

Patch = dict[str, Any]


# ============================================================
# Planning
# ============================================================


def group_by_phase(tasks: Sequence[Task]) -> dict[Phase, list[Task]]:
    """按阶段分组，五个分组始终存在，组内保持原顺序"""
    grouped: dict[Phase, list[Task]] = {phase: [] for phase in PHASES}
    for task in tasks:
        grouped[task.phase].append(task)
    return grouped


def make_template_tasks(templates: Sequence[tuple[str, Phase]]) -> list[Task]:
    """把 (title, phase) 模板展开为新任务（todo，无日期）"""
    return [Task(title=title, phase=phase) for title, phase in templates]


def add_task(project: Project, title: str, phase: Phase = Phase.INITIATION) -> Patch | None:
    """追加单个任务；标题为空白时不产生 patch"""
    title = title.strip()
    if not title:
        return None
    return {"tasks": [*project.tasks, Task(title=title, phase=phase)]}


def add_template_tasks(
    project: Project,
    templates: Sequence[tuple[str, Phase]] = PLANNING_TASK_TEMPLATES,
) -> Patch:
    """在现有任务之后追加模板任务"""
    return {"tasks": [*project.tasks, *make_template_tasks(templates)]}


def set_task_status(project: Project, task_id: str, status: TaskStatus) -> Patch:
    return {
        "tasks": [
            t.model_copy(update={"status": status}) if t.id == task_id else t
            for t in project.tasks
        ]
    }


def set_task_dates(project: Project, task_id: str, start: str, due: str) -> Patch:
    """同时设置 start/due，不校验先后顺序"""
    return {
        "tasks": [
            t.model_copy(update={"start": start or "", "due": due or ""})
            if t.id == task_id
            else t
            for t in project.tasks
        ]
    }


def remove_task(project: Project, task_id: str) -> Patch:
    return {"tasks": [t for t in project.tasks if t.id != task_id]}


def clear_tasks() -> Patch:
    return {"tasks": []}


def find_task(project: Project, task_id: str) -> Task | None:
    return next((t for t in project.tasks if t.id == task_id), None)


# ============================================================
# Timeline
# ============================================================


def completion_percentage(tasks: Sequence[Task]) -> int:
    """完成率 = round(100 × done / max(1, total))

    Python 的 round() 是银行家舍入，这里按四舍五入（.5 向上）计算。
    """
    total = max(1, len(tasks))
    done = sum(1 for t in tasks if t.status == TaskStatus.DONE)
    return (200 * done + total) // (2 * total)


def timeline_rows(tasks: Sequence[Task]) -> list[dict[str, str]]:
    """时间线行：标题 + start → due（未设置时为空串）"""
    return [
        {"id": t.id, "title": t.title, "start": t.start, "due": t.due, "status": t.status}
        for t in tasks
    ]


# ============================================================
# Risk
# ============================================================


def risk_score(risk: Risk) -> int:
    """score = ordinal(impact) × ordinal(likelihood)"""
    return risk.score


def sorted_risks(risks: Sequence[Risk]) -> list[Risk]:
    """按 score 降序（稳定排序，同分保持录入顺序）"""
    return sorted(risks, key=risk_score, reverse=True)


def add_risk(
    project: Project,
    title: str,
    impact: Level = Level.MEDIUM,
    likelihood: Level = Level.MEDIUM,
) -> Patch | None:
    """追加风险；标题为空白时不产生 patch"""
    title = title.strip()
    if not title:
        return None
    risk = Risk(title=title, impact=impact, likelihood=likelihood)
    return {"risks": [*project.risks, risk]}


def seed_example_risks(project: Project) -> Patch:
    """追加三条固定示例风险"""
    examples = [
        Risk(title=title, impact=impact, likelihood=likelihood)
        for title, impact, likelihood in EXAMPLE_RISKS
    ]
    return {"risks": [*project.risks, *examples]}


def set_risk_open(project: Project, risk_id: str, is_open: bool) -> Patch:
    return {
        "risks": [
            r.model_copy(update={"open": is_open}) if r.id == risk_id else r
            for r in project.risks
        ]
    }


def set_mitigation(project: Project, risk_id: str, mitigation: str) -> Patch:
    return {
        "risks": [
            r.model_copy(update={"mitigation": mitigation}) if r.id == risk_id else r
            for r in project.risks
        ]
    }


def remove_risk(project: Project, risk_id: str) -> Patch:
    return {"risks": [r for r in project.risks if r.id != risk_id]}


def find_risk(project: Project, risk_id: str) -> Risk | None:
    return next((r for r in project.risks if r.id == risk_id), None)


# ============================================================
# Stand-up
# ============================================================


def add_standup(
    project: Project,
    yesterday: str = "",
    today: str = "",
    blockers: str = "",
    on: date | None = None,
) -> Patch:
    """新记录插到最前（新的在前）；日期为创建当天（UTC），不可编辑

    站会日志只追加，不提供修改或删除。
    """
    standup = Standup(
        date=(on or utc_today()).isoformat(),
        yesterday=yesterday,
        today=today,
        blockers=blockers,
    )
    return {"standups": [standup, *project.standups]}
