"""SSE 变更流路由

GET /api/stream/workspace: 实时推送 Workspace 变更。
连接建立时先推送一次 snapshot（当前项目数与选中项目），之后逐条推送变更，
空闲时按心跳间隔发送注释保活。
"""

import asyncio
import json

from fastapi import APIRouter, Depends
from pmcopilot.core.config import SSE_HEARTBEAT_INTERVAL
from pmcopilot.core.workspace import Workspace, WorkspaceChange
from sse_starlette.sse import EventSourceResponse

from ..deps import get_sse_hub, get_workspace
from ..services.sse_hub import SSEHub

router = APIRouter()


def _change_to_sse(change: WorkspaceChange, workspace: Workspace) -> dict:
    data = change.model_dump(mode="json")
    data["active_id"] = workspace.active_id
    return {
        "event": change.kind.value,
        "data": json.dumps(data, ensure_ascii=False),
    }


@router.get("/api/stream/workspace")
async def stream_workspace(
    workspace: Workspace = Depends(get_workspace),
    sse_hub: SSEHub = Depends(get_sse_hub),
):
    async def event_generator():
        queue = await sse_hub.subscribe()
        try:
            yield {
                "event": "snapshot",
                "data": json.dumps(
                    {
                        "project_count": len(workspace.projects),
                        "active_id": workspace.active_id,
                    },
                    ensure_ascii=False,
                ),
            }
            while True:
                try:
                    change = await asyncio.wait_for(
                        queue.get(), timeout=SSE_HEARTBEAT_INTERVAL
                    )
                    yield _change_to_sse(change, workspace)
                except TimeoutError:
                    yield {"comment": "heartbeat"}
        finally:
            await sse_hub.unsubscribe(queue)

    return EventSourceResponse(event_generator())
