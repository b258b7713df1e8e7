"""Core 异常体系"""


class CoreError(Exception):
    """Core 包基础异常"""


class ProjectNotFoundError(CoreError):
    """指定的项目不存在"""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project with id {project_id} does not exist")
        self.project_id = project_id


class ImportDocumentError(CoreError):
    """导入文档校验失败

    errors 为结构化错误列表，每项包含 loc（字段路径）与 msg（说明）。
    校验失败时不发生任何状态变更。
    """

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
