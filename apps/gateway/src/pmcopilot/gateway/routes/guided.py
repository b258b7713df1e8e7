"""引导路由 -- 8 步线性引导

GET  /api/projects/{project_id}/guided: 当前步骤状态
POST /api/projects/{project_id}/guided/open: 打开引导视图（回到第 1 步）
POST /api/projects/{project_id}/guided/next: 前进一步
- 409 STEP_NOT_READY: 当前步骤条件未满足
- 409 STEP_TERMINAL: 已在第 8 步
POST /api/projects/{project_id}/guided/back: 后退一步
- 409 STEP_AT_START: 已在第 1 步
POST /api/projects/{project_id}/guided/templates: 第 4 步追加模板任务
PUT  /api/projects/{project_id}/guided/tasks/{task_id}/dates: 第 5 步填写日期
"""

from fastapi import APIRouter, Depends
from pmcopilot.core.boards import set_task_dates
from pmcopilot.core.guided import (
    COMPLETION_VIEW,
    STEP_GUIDES,
    TOTAL_STEPS,
    GuidedSession,
    GuidedSessions,
    add_guided_templates,
    tasks_for_dating,
)
from pmcopilot.core.models import Project, Task
from pmcopilot.core.workspace import Workspace
from pydantic import BaseModel, Field

from ..deps import get_guided_sessions, get_workspace
from ..errors import error_response, project_not_found, task_not_found

router = APIRouter()


class GuidedState(BaseModel):
    """引导视图状态"""

    project_id: str
    step: int
    total_steps: int = TOTAL_STEPS
    progress_percent: int
    title: str
    hint: str
    ready: bool = Field(description="当前步骤是否满足前进条件")
    is_terminal: bool
    next_view: str | None = Field(default=None, description="完成后建议切换的视图")
    dating_tasks: list[Task] = Field(default_factory=list, description="第 5 步可填写日期的任务")


class TaskDatesRequest(BaseModel):
    start: str = ""
    due: str = ""


def _state(project: Project, session: GuidedSession) -> GuidedState:
    guide = STEP_GUIDES[session.step]
    return GuidedState(
        project_id=project.id,
        step=int(session.step),
        progress_percent=session.progress_percent,
        title=guide.title,
        hint=guide.hint,
        ready=session.is_terminal or session.can_advance(project),
        is_terminal=session.is_terminal,
        next_view=COMPLETION_VIEW if session.is_terminal else None,
        dating_tasks=tasks_for_dating(project),
    )


@router.get("/api/projects/{project_id}/guided", response_model=GuidedState)
async def get_guided(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    return _state(project, guided_sessions.get(project_id))


@router.post("/api/projects/{project_id}/guided/open", response_model=GuidedState)
async def open_guided(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    """打开引导视图：总是从第 1 步开始"""
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    return _state(project, guided_sessions.open(project_id))


@router.post("/api/projects/{project_id}/guided/next", response_model=GuidedState)
async def next_step(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)

    session = guided_sessions.get(project_id)
    if session.is_terminal:
        return error_response(409, "STEP_TERMINAL", "Guided flow is already complete")
    if not session.advance(project):
        return error_response(
            409,
            "STEP_NOT_READY",
            f"Step {int(session.step)} is not ready",
        )
    return _state(project, session)


@router.post("/api/projects/{project_id}/guided/back", response_model=GuidedState)
async def previous_step(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)

    session = guided_sessions.get(project_id)
    if not session.retreat():
        return error_response(409, "STEP_AT_START", "Already at the first step")
    return _state(project, session)


@router.post("/api/projects/{project_id}/guided/templates", response_model=GuidedState)
async def add_templates(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    """第 4 步：追加 7 件模板任务"""
    patched = await workspace.update_project(project_id, add_guided_templates)
    if patched is None:
        return project_not_found(project_id)
    return _state(patched, guided_sessions.get(project_id))


@router.put(
    "/api/projects/{project_id}/guided/tasks/{task_id}/dates",
    response_model=GuidedState,
)
async def set_dates(
    project_id: str,
    task_id: str,
    body: TaskDatesRequest,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    """第 5 步：只允许编辑前 3 件任务的日期"""
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    if all(t.id != task_id for t in tasks_for_dating(project)):
        return task_not_found(task_id)

    patched = await workspace.update_project(
        project_id,
        lambda p: set_task_dates(p, task_id, body.start, body.due),
    )
    if patched is None:
        return project_not_found(project_id)
    return _state(patched, guided_sessions.get(project_id))
