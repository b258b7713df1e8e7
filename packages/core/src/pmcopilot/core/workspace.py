"""Workspace -- 应用状态对象（项目集合 + 当前选中项目 + 全局 Knowledge）

所有变更通过显式方法完成：先更新内存，再按注册顺序通知订阅者。
持久化由 StorePersister 作为订阅者完成，方法返回前写入已落盘。
patch 按 Project schema 做类型转换（None 归为空值、未知阶段归入 Initiation），
不做业务校验；业务规则只用于引导步骤的放行判断，从不拒绝写入。
读取当前项目、构造 patch、写入三步在同一把锁内完成（update_project）。
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from enum import StrEnum
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError

from .config import ACTIVE_KEY, KNOWLEDGE_KEY, PROJECTS_KEY
from .models import PATCHABLE_FIELDS, Project
from .store import KeyValueStore, load_json, save_json

log = structlog.get_logger()


class ChangeKind(StrEnum):
    """Workspace 变更类型"""

    PROJECT_CREATED = "project_created"
    PROJECT_PATCHED = "project_patched"
    PROJECT_REMOVED = "project_removed"
    ACTIVE_CHANGED = "active_changed"
    KNOWLEDGE_CHANGED = "knowledge_changed"
    PROJECTS_REPLACED = "projects_replaced"


class WorkspaceChange(BaseModel):
    """一次变更的描述，keys 为受影响的持久化键"""

    kind: ChangeKind
    project_id: str = ""
    fields: list[str] = Field(default_factory=list)
    keys: list[str] = Field(default_factory=list)


Subscriber = Callable[[WorkspaceChange], Awaitable[None]]


class Workspace:
    """应用状态对象

    由组合根（gateway lifespan / CLI）持有，通过依赖注入传递。
    """

    def __init__(
        self,
        projects: Iterable[Project] | None = None,
        active_id: str = "",
        knowledge: str = "",
    ) -> None:
        self._projects: list[Project] = list(projects or [])
        self._active_id = active_id if self._find(active_id) is not None else ""
        self._knowledge = knowledge
        self._subscribers: list[Subscriber] = []
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------
    # 读取
    # ------------------------------------------------------------

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    @property
    def active_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> Project | None:
        return self._find(self._active_id)

    @property
    def knowledge(self) -> str:
        return self._knowledge

    def project(self, project_id: str) -> Project | None:
        """按 id 查询项目"""
        return self._find(project_id)

    def assistant_context(self) -> dict[str, Any] | None:
        """当前项目的只读快照，供 AI 助手作为上下文

        Returns:
            name/goals/stakeholders/tasks/risks 字典；无选中项目时为 None
        """
        active = self.active
        if active is None:
            return None
        return active.model_dump(
            mode="json",
            include={"name", "goals", "stakeholders", "tasks", "risks"},
        )

    def _find(self, project_id: str) -> Project | None:
        if not project_id:
            return None
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    # ------------------------------------------------------------
    # 订阅
    # ------------------------------------------------------------

    def subscribe(self, subscriber: Subscriber) -> None:
        """注册变更订阅者（按注册顺序调用）"""
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    async def _notify(self, change: WorkspaceChange) -> None:
        for subscriber in list(self._subscribers):
            await subscriber(change)

    # ------------------------------------------------------------
    # 变更
    # ------------------------------------------------------------

    async def create_project(self) -> Project:
        """新建项目（字段为空，名称 New Project N），并设为当前项目"""
        async with self._lock:
            project = Project(name=f"New Project {len(self._projects) + 1}")
            self._projects.append(project)
            self._active_id = project.id
            await self._notify(
                WorkspaceChange(
                    kind=ChangeKind.PROJECT_CREATED,
                    project_id=project.id,
                    keys=[PROJECTS_KEY, ACTIVE_KEY],
                )
            )
        log.info("project_created", project_id=project.id, name=project.name)
        return project

    def _merge(self, project: Project, fields: Mapping[str, Any]) -> tuple[Project, list[str]]:
        update = {k: v for k, v in fields.items() if k in PATCHABLE_FIELDS}
        ignored = sorted(set(fields) - set(update))
        if ignored:
            log.warning("patch_fields_ignored", project_id=project.id, fields=ignored)
        merged = Project.model_validate({**project.model_dump(), **update})
        return merged, sorted(update)

    async def update_project(
        self,
        project_id: str,
        build: Callable[[Project], Mapping[str, Any] | None],
    ) -> Project | None:
        """在锁内读取最新项目、构造 patch 并写入

        Args:
            project_id: 目标项目 ID
            build: 接收当前 Project，返回字段 patch；返回 None 表示不变更

        Returns:
            更新后的 Project（build 返回 None 时为当前 Project）；
            项目不存在时返回 None（no-op）

        Raises:
            ValidationError: patch 的字段值无法转换为 Project 的字段类型
        """
        async with self._lock:
            for index, project in enumerate(self._projects):
                if project.id == project_id:
                    break
            else:
                return None

            fields = build(project)
            if fields is None:
                return project

            patched, changed = self._merge(project, fields)
            self._projects[index] = patched
            await self._notify(
                WorkspaceChange(
                    kind=ChangeKind.PROJECT_PATCHED,
                    project_id=project_id,
                    fields=changed,
                    keys=[PROJECTS_KEY],
                )
            )
        return patched

    async def patch_project(
        self,
        project_id: str,
        fields: Mapping[str, Any],
    ) -> Project | None:
        """整体替换一个或多个顶层字段（last-write-wins）

        id 与未知字段被忽略。项目不存在时返回 None（no-op）。
        """
        return await self.update_project(project_id, lambda _: fields)

    async def remove_project(self, project_id: str) -> bool:
        """删除项目；若删除的是当前项目，指针移到剩余第一个项目或置空

        Returns:
            True 如果项目存在并已删除
        """
        async with self._lock:
            remaining = [p for p in self._projects if p.id != project_id]
            if len(remaining) == len(self._projects):
                return False
            self._projects = remaining

            keys = [PROJECTS_KEY]
            if self._active_id == project_id:
                self._active_id = remaining[0].id if remaining else ""
                keys.append(ACTIVE_KEY)

            await self._notify(
                WorkspaceChange(
                    kind=ChangeKind.PROJECT_REMOVED,
                    project_id=project_id,
                    keys=keys,
                )
            )
        log.info("project_removed", project_id=project_id, active_id=self._active_id)
        return True

    async def select_project(self, project_id: str) -> bool:
        """切换当前项目；"" 表示不选中。未知 id 被拒绝。"""
        async with self._lock:
            if project_id and self._find(project_id) is None:
                return False
            self._active_id = project_id
            await self._notify(
                WorkspaceChange(
                    kind=ChangeKind.ACTIVE_CHANGED,
                    project_id=project_id,
                    keys=[ACTIVE_KEY],
                )
            )
        return True

    async def set_knowledge(self, text: str) -> None:
        """替换全局 Knowledge 文本"""
        async with self._lock:
            self._knowledge = text
            await self._notify(
                WorkspaceChange(kind=ChangeKind.KNOWLEDGE_CHANGED, keys=[KNOWLEDGE_KEY])
            )

    async def replace_projects(self, projects: Iterable[Project]) -> None:
        """整体替换项目集合（导入），当前项目指向第一个项目或置空"""
        async with self._lock:
            self._projects = list(projects)
            self._active_id = self._projects[0].id if self._projects else ""
            await self._notify(
                WorkspaceChange(
                    kind=ChangeKind.PROJECTS_REPLACED,
                    project_id=self._active_id,
                    keys=[PROJECTS_KEY, ACTIVE_KEY],
                )
            )
        log.info("projects_replaced", project_count=len(self._projects))

    # ------------------------------------------------------------
    # 持久化
    # ------------------------------------------------------------

    def document_for(self, key: str) -> Any:
        """返回指定持久化键对应的可序列化文档"""
        if key == PROJECTS_KEY:
            return [p.model_dump(mode="json") for p in self._projects]
        if key == ACTIVE_KEY:
            return self._active_id
        if key == KNOWLEDGE_KEY:
            return self._knowledge
        raise KeyError(key)

    @classmethod
    async def load(cls, store: KeyValueStore) -> "Workspace":
        """启动时从存储读取三个键，任何损坏都回退为空值"""
        raw_projects = await load_json(store, PROJECTS_KEY, [])
        raw_active = await load_json(store, ACTIVE_KEY, "")
        raw_knowledge = await load_json(store, KNOWLEDGE_KEY, "")

        projects: list[Project] = []
        if isinstance(raw_projects, list):
            try:
                projects = [Project.model_validate(p) for p in raw_projects]
            except ValidationError as e:
                log.warning(
                    "stored_document_corrupt",
                    key=PROJECTS_KEY,
                    error_count=e.error_count(),
                )
                projects = []
        else:
            log.warning("stored_document_corrupt", key=PROJECTS_KEY, error="not a list")

        active_id = raw_active if isinstance(raw_active, str) else ""
        knowledge = raw_knowledge if isinstance(raw_knowledge, str) else ""

        workspace = cls(projects=projects, active_id=active_id, knowledge=knowledge)
        log.info(
            "workspace_loaded",
            project_count=len(projects),
            active_id=workspace.active_id,
        )
        return workspace


class StorePersister:
    """持久化订阅者 -- 把受影响的键写回 KeyValueStore"""

    def __init__(self, store: KeyValueStore, workspace: Workspace) -> None:
        self._store = store
        self._workspace = workspace

    async def __call__(self, change: WorkspaceChange) -> None:
        for key in change.keys:
            await save_json(self._store, key, self._workspace.document_for(key))


async def open_workspace(store: KeyValueStore) -> Workspace:
    """加载 Workspace 并挂上持久化订阅者"""
    workspace = await Workspace.load(store)
    workspace.subscribe(StorePersister(store, workspace))
    return workspace
