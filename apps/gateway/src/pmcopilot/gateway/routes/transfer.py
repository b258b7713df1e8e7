"""导入 / 导出路由

GET  /api/export: 下载 {projects, v: 1}（pm-copilot-YYYY-MM-DD.json）
POST /api/import: 原始 JSON 请求体，整体替换项目集合
- 200: 导入成功
- 400 INVALID_IMPORT: 校验失败，状态不变
"""

import structlog
from fastapi import APIRouter, Depends, Request
from pmcopilot.core.exceptions import ImportDocumentError
from pmcopilot.core.guided import GuidedSessions
from pmcopilot.core.transfer import dump_document, export_filename, import_document
from pmcopilot.core.workspace import Workspace
from starlette.responses import Response

from ..deps import get_guided_sessions, get_workspace
from ..errors import error_response

log = structlog.get_logger()

router = APIRouter()


@router.get("/api/export")
async def export_projects(workspace: Workspace = Depends(get_workspace)):
    """导出全部项目为附件"""
    return Response(
        content=dump_document(workspace.projects),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename()}"',
        },
    )


@router.post("/api/import")
async def import_projects(
    request: Request,
    workspace: Workspace = Depends(get_workspace),
    guided_sessions: GuidedSessions = Depends(get_guided_sessions),
):
    """校验后整体替换项目集合（all-or-nothing）"""
    raw = await request.body()
    try:
        projects = await import_document(workspace, raw)
    except ImportDocumentError as e:
        log.warning("import_rejected", error_count=len(e.errors))
        return error_response(400, "INVALID_IMPORT", str(e), details=e.errors)

    guided_sessions.clear()
    return {"project_count": len(projects), "active_id": workspace.active_id}
