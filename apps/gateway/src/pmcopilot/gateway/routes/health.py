"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含本地存储连通性、磁盘空间、LLM 模式。
"""

import shutil

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查

    检查项：
    1. store: 本地 key/value 存储可读
    2. disk_space_mb: 磁盘剩余空间
    3. llm_mode: /api/chat 当前使用 litellm 还是 offline
    """
    checks: dict = {}
    all_ok = True

    try:
        store = request.app.state.store
        await store.get("__ready__")
        checks["store"] = "ok"
    except Exception as e:
        log.warning("ready_check_failed", check="store", error=str(e))
        checks["store"] = f"error: {str(e)}"
        all_ok = False

    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    llm_service = getattr(request.app.state, "llm_service", None)
    checks["llm_mode"] = llm_service.mode if llm_service is not None else "unavailable"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
