"""项目路由 -- Workspace 的项目集合 / 当前项目 / Knowledge

GET/POST /api/projects
GET/PATCH/DELETE /api/projects/{project_id}
GET/PUT /api/active
GET/PUT /api/knowledge
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from pmcopilot.core.guided import GuidedSessions
from pmcopilot.core.models import Project
from pmcopilot.core.workspace import Workspace
from pydantic import BaseModel, Field, ValidationError
from starlette.responses import JSONResponse, Response

from ..deps import get_guided_sessions, get_workspace
from ..errors import error_response, project_not_found

router = APIRouter()


class ProjectListResponse(BaseModel):
    """项目列表响应"""

    projects: list[Project]
    active_id: str


class ActiveRequest(BaseModel):
    project_id: str = Field(default="", description="要选中的项目 ID，空串表示不选中")


class KnowledgeBody(BaseModel):
    text: str = Field(default="", description="全局 Knowledge 文本")


@router.get("/api/projects", response_model=ProjectListResponse)
async def list_projects(workspace: Workspace = Depends(get_workspace)):
    return ProjectListResponse(projects=workspace.projects, active_id=workspace.active_id)


@router.post("/api/projects", status_code=201, response_model=Project)
async def create_project(workspace: Workspace = Depends(get_workspace)):
    """新建项目并设为当前项目"""
    return await workspace.create_project()


@router.get("/api/projects/{project_id}", response_model=Project)
async def get_project(project_id: str, workspace: Workspace = Depends(get_workspace)):
    project = workspace.project(project_id)
    if project is None:
        return project_not_found(project_id)
    return project


@router.patch("/api/projects/{project_id}", response_model=Project)
async def patch_project(
    project_id: str,
    fields: dict[str, Any] = Body(...),
    workspace: Workspace = Depends(get_workspace),
):
    """整体替换一个或多个顶层字段（last-write-wins）"""
    try:
        patched = await workspace.patch_project(project_id, fields)
    except ValidationError as e:
        return error_response(
            422,
            "INVALID_PATCH",
            "Patch does not match the project schema",
            details=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()],
        )
    if patched is None:
        return project_not_found(project_id)
    return patched


@router.delete("/api/projects/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    removed = await workspace.remove_project(project_id)
    if not removed:
        return project_not_found(project_id)
    guided_sessions.discard(project_id)
    return Response(status_code=204)


@router.get("/api/active")
async def get_active(workspace: Workspace = Depends(get_workspace)):
    active = workspace.active
    return {
        "active_id": workspace.active_id,
        "project": active.model_dump(mode="json") if active else None,
    }


@router.put("/api/active")
async def set_active(body: ActiveRequest, workspace: Workspace = Depends(get_workspace)):
    """切换当前项目；未知 ID 返回 404"""
    selected = await workspace.select_project(body.project_id)
    if not selected:
        return project_not_found(body.project_id)
    return JSONResponse(status_code=200, content={"active_id": workspace.active_id})


@router.get("/api/knowledge", response_model=KnowledgeBody)
async def get_knowledge(workspace: Workspace = Depends(get_workspace)):
    return KnowledgeBody(text=workspace.knowledge)


@router.put("/api/knowledge", response_model=KnowledgeBody)
async def put_knowledge(body: KnowledgeBody, workspace: Workspace = Depends(get_workspace)):
    await workspace.set_knowledge(body.text)
    return KnowledgeBody(text=workspace.knowledge)
