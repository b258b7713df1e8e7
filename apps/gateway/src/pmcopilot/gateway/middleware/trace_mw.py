"""TraceMiddleware -- 项目级日志上下文

/api/projects/{project_id}/... 路由把 project_id 绑定到 structlog
contextvars，贯穿该请求内的 Workspace 变更日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_PROJECTS_PREFIX = "/api/projects/"


def extract_project_id(path: str) -> str | None:
    """从 /api/projects/{project_id}[/...] 中提取 project_id"""
    if not path.startswith(_PROJECTS_PREFIX):
        return None
    project_id = path[len(_PROJECTS_PREFIX):].split("/", 1)[0]
    return project_id or None


class TraceMiddleware(BaseHTTPMiddleware):
    """项目级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        project_id = extract_project_id(request.url.path)
        if project_id:
            structlog.contextvars.bind_contextvars(project_id=project_id)

        return await call_next(request)
