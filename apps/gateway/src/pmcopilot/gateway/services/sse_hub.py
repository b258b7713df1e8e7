"""SSEHub -- 内存中 Workspace 变更广播器

每个订阅者持有一个 asyncio.Queue。SSEHub 本身是 Workspace 的订阅者
（可调用对象），收到变更后非阻塞地投递到所有队列。
"""

import asyncio

import structlog
from pmcopilot.core.workspace import WorkspaceChange

log = structlog.get_logger()


class SSEHub:
    """SSE 变更广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = 100) -> None:
        self._subscribers: set[asyncio.Queue] = set()
        self._queue_maxsize = queue_maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self) -> asyncio.Queue:
        """订阅 Workspace 变更流

        Returns:
            asyncio.Queue 实例，新变更会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.add(queue)
        return queue

    async def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    async def broadcast(self, change: WorkspaceChange) -> None:
        """向所有订阅者广播变更；队列已满的订阅者被移除"""
        dead_queues = []
        for queue in self._subscribers:
            try:
                queue.put_nowait(change)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        for q in dead_queues:
            self._subscribers.discard(q)
        if dead_queues:
            log.warning("sse_subscribers_dropped", count=len(dead_queues))

    async def __call__(self, change: WorkspaceChange) -> None:
        await self.broadcast(change)
