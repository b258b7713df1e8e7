"""看板路由 -- Planning / Timeline / Risk / Stand-up

所有写操作都交给 Workspace.update_project：在锁内基于最新项目用 boards 构造 patch。
路由里的存在性检查只用于返回 404。
"""

from fastapi import APIRouter, Depends
from pmcopilot.core import boards
from pmcopilot.core.models import (
    PHASES,
    Level,
    Phase,
    Project,
    Risk,
    Standup,
    Task,
    TaskStatus,
    coerce_phase,
)
from pmcopilot.core.workspace import Workspace
from pydantic import BaseModel, Field, field_validator
from starlette.responses import JSONResponse, Response

from ..deps import get_workspace
from ..errors import project_not_found, risk_not_found, task_not_found

router = APIRouter()


# ============================================================
# 请求 / 响应模型
# ============================================================


class NewTaskRequest(BaseModel):
    title: str = ""
    phase: Phase = Phase.INITIATION

    @field_validator("phase", mode="before")
    @classmethod
    def _phase(cls, value: object) -> Phase:
        return coerce_phase(value)


class TaskUpdateRequest(BaseModel):
    """任务更新；未提供的字段保持不变"""

    status: TaskStatus | None = None
    start: str | None = None
    due: str | None = None


class NewRiskRequest(BaseModel):
    title: str = ""
    impact: Level = Level.MEDIUM
    likelihood: Level = Level.MEDIUM


class RiskUpdateRequest(BaseModel):
    open: bool | None = None
    mitigation: str | None = None


class NewStandupRequest(BaseModel):
    yesterday: str = ""
    today: str = ""
    blockers: str = ""


class TaskListResponse(BaseModel):
    tasks: list[Task]


class PlanResponse(BaseModel):
    """按阶段分组的任务（五个分组始终存在）"""

    phases: dict[Phase, list[Task]]


class TimelineRow(BaseModel):
    id: str
    title: str
    start: str
    due: str
    status: TaskStatus


class TimelineResponse(BaseModel):
    completion_percentage: int
    rows: list[TimelineRow]


class ScoredRisk(BaseModel):
    risk: Risk
    score: int = Field(description="impact × likelihood")


class RiskListResponse(BaseModel):
    risks: list[ScoredRisk] = Field(description="按 score 降序")


class StandupListResponse(BaseModel):
    standups: list[Standup] = Field(description="新的在前")


def _risks(project: Project) -> RiskListResponse:
    return RiskListResponse(
        risks=[
            ScoredRisk(risk=r, score=boards.risk_score(r))
            for r in boards.sorted_risks(project.risks)
        ]
    )


# ============================================================
# Planning
# ============================================================


@router.get("/api/projects/{project_id}/plan", response_model=PlanResponse)
async def get_plan(project_id: str, workspace: Workspace = Depends(get_workspace)):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    grouped = boards.group_by_phase(project.tasks)
    return PlanResponse(phases={phase: grouped[phase] for phase in PHASES})


@router.post("/api/projects/{project_id}/tasks", response_model=TaskListResponse)
async def add_task(
    project_id: str,
    body: NewTaskRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """追加任务；空白标题不产生变更（200）"""
    patched = await workspace.update_project(
        project_id, lambda p: boards.add_task(p, body.title, body.phase)
    )
    if patched is None:
        return project_not_found(project_id)
    if not body.title.strip():
        return TaskListResponse(tasks=patched.tasks)

    return JSONResponse(
        status_code=201,
        content=TaskListResponse(tasks=patched.tasks).model_dump(mode="json"),
    )


@router.post("/api/projects/{project_id}/tasks/templates", response_model=TaskListResponse)
async def add_template_tasks(project_id: str, workspace: Workspace = Depends(get_workspace)):
    patched = await workspace.update_project(project_id, boards.add_template_tasks)
    if patched is None:
        return project_not_found(project_id)
    return TaskListResponse(tasks=patched.tasks)


@router.delete("/api/projects/{project_id}/tasks", status_code=204)
async def clear_tasks(project_id: str, workspace: Workspace = Depends(get_workspace)):
    patched = await workspace.update_project(project_id, lambda _: boards.clear_tasks())
    if patched is None:
        return project_not_found(project_id)
    return Response(status_code=204)


@router.patch("/api/projects/{project_id}/tasks/{task_id}", response_model=Task)
async def update_task(
    project_id: str,
    task_id: str,
    body: TaskUpdateRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """更新状态和/或日期"""
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    if boards.find_task(project, task_id) is None:
        return task_not_found(task_id)

    def build(current: Project) -> boards.Patch | None:
        task = boards.find_task(current, task_id)
        if task is None:
            return None
        if body.status is not None:
            current = current.model_copy(
                update=boards.set_task_status(current, task_id, body.status)
            )
        if body.start is not None or body.due is not None:
            current = current.model_copy(
                update=boards.set_task_dates(
                    current,
                    task_id,
                    task.start if body.start is None else body.start,
                    task.due if body.due is None else body.due,
                )
            )
        return {"tasks": current.tasks}

    patched = await workspace.update_project(project_id, build)
    task = boards.find_task(patched, task_id) if patched is not None else None
    if task is None:
        return task_not_found(task_id)
    return task


@router.delete("/api/projects/{project_id}/tasks/{task_id}", status_code=204)
async def delete_task(
    project_id: str,
    task_id: str,
    workspace: Workspace = Depends(get_workspace),
):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    if boards.find_task(project, task_id) is None:
        return task_not_found(task_id)
    await workspace.update_project(project_id, lambda p: boards.remove_task(p, task_id))
    return Response(status_code=204)


# ============================================================
# Timeline
# ============================================================


@router.get("/api/projects/{project_id}/timeline", response_model=TimelineResponse)
async def get_timeline(project_id: str, workspace: Workspace = Depends(get_workspace)):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    return TimelineResponse(
        completion_percentage=boards.completion_percentage(project.tasks),
        rows=[TimelineRow(**row) for row in boards.timeline_rows(project.tasks)],
    )


# ============================================================
# Risk
# ============================================================


@router.get("/api/projects/{project_id}/risks", response_model=RiskListResponse)
async def list_risks(project_id: str, workspace: Workspace = Depends(get_workspace)):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    return _risks(project)


@router.post("/api/projects/{project_id}/risks", response_model=RiskListResponse)
async def add_risk(
    project_id: str,
    body: NewRiskRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """追加风险；空白标题不产生变更（200）"""
    patched = await workspace.update_project(
        project_id, lambda p: boards.add_risk(p, body.title, body.impact, body.likelihood)
    )
    if patched is None:
        return project_not_found(project_id)
    if not body.title.strip():
        return _risks(patched)

    return JSONResponse(status_code=201, content=_risks(patched).model_dump(mode="json"))


@router.post("/api/projects/{project_id}/risks/examples", response_model=RiskListResponse)
async def seed_example_risks(project_id: str, workspace: Workspace = Depends(get_workspace)):
    patched = await workspace.update_project(project_id, boards.seed_example_risks)
    if patched is None:
        return project_not_found(project_id)
    return _risks(patched)


@router.patch("/api/projects/{project_id}/risks/{risk_id}", response_model=ScoredRisk)
async def update_risk(
    project_id: str,
    risk_id: str,
    body: RiskUpdateRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """切换 open 状态和/或更新对策"""
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    if boards.find_risk(project, risk_id) is None:
        return risk_not_found(risk_id)

    def build(current: Project) -> boards.Patch | None:
        if boards.find_risk(current, risk_id) is None:
            return None
        if body.open is not None:
            current = current.model_copy(
                update=boards.set_risk_open(current, risk_id, body.open)
            )
        if body.mitigation is not None:
            current = current.model_copy(
                update=boards.set_mitigation(current, risk_id, body.mitigation)
            )
        return {"risks": current.risks}

    patched = await workspace.update_project(project_id, build)
    risk = boards.find_risk(patched, risk_id) if patched is not None else None
    if risk is None:
        return risk_not_found(risk_id)
    return ScoredRisk(risk=risk, score=boards.risk_score(risk))


@router.delete("/api/projects/{project_id}/risks/{risk_id}", status_code=204)
async def delete_risk(
    project_id: str,
    risk_id: str,
    workspace: Workspace = Depends(get_workspace),
):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    if boards.find_risk(project, risk_id) is None:
        return risk_not_found(risk_id)
    await workspace.update_project(project_id, lambda p: boards.remove_risk(p, risk_id))
    return Response(status_code=204)


# ============================================================
# Stand-up
# ============================================================


@router.get("/api/projects/{project_id}/standups", response_model=StandupListResponse)
async def list_standups(project_id: str, workspace: Workspace = Depends(get_workspace)):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    return StandupListResponse(standups=project.standups)


@router.post(
    "/api/projects/{project_id}/standups",
    status_code=201,
    response_model=StandupListResponse,
)
async def add_standup(
    project_id: str,
    body: NewStandupRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """保存站会记录（只追加）"""
    patched = await workspace.update_project(
        project_id,
        lambda p: boards.add_standup(p, body.yesterday, body.today, body.blockers),
    )
    if patched is None:
        return project_not_found(project_id)
    return StandupListResponse(standups=patched.standups)
