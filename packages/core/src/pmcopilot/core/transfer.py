"""Import / Export -- 项目集合的整体导出与导入

导出：{"projects": [...], "v": 1}，文件名 pm-copilot-YYYY-MM-DD.json。
导入：先做 schema 校验得到类型化的 Project 列表，失败时抛出带结构化
错误的 ImportDocumentError，不产生任何状态变更（all-or-nothing）。
"""

import json
from collections.abc import Sequence
from datetime import date

from pydantic import ValidationError

from .config import EXPORT_FILENAME_PREFIX, EXPORT_FORMAT_VERSION
from .exceptions import ImportDocumentError
from .models import ExportDocument, Project
from .workspace import Workspace


def export_document(projects: Sequence[Project]) -> ExportDocument:
    """构建导出文档"""
    return ExportDocument(projects=list(projects), v=EXPORT_FORMAT_VERSION)


def dump_document(projects: Sequence[Project]) -> str:
    """导出为缩进 JSON 文本"""
    doc = export_document(projects)
    return json.dumps(doc.model_dump(mode="json"), ensure_ascii=False, indent=2)


def export_filename(today: date | None = None) -> str:
    """下载文件名，带当天日期"""
    return f"{EXPORT_FILENAME_PREFIX}-{(today or date.today()).isoformat()}.json"


def parse_document(raw: str | bytes) -> list[Project]:
    """校验并解析导入文档

    Args:
        raw: 上传的文档内容

    Returns:
        类型化的 Project 列表（可能为空）

    Raises:
        ImportDocumentError: JSON 无法解析、缺少 projects 列表、
            版本不受支持，或任一项目不符合 schema
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ImportDocumentError(
            "Invalid file",
            errors=[{"loc": [], "msg": f"invalid JSON: {e}"}],
        ) from e

    if not isinstance(data, dict) or not isinstance(data.get("projects"), list):
        raise ImportDocumentError(
            "Invalid file",
            errors=[{"loc": ["projects"], "msg": "a list of projects is required"}],
        )

    version = data.get("v", EXPORT_FORMAT_VERSION)
    if version != EXPORT_FORMAT_VERSION:
        raise ImportDocumentError(
            "Invalid file",
            errors=[{"loc": ["v"], "msg": f"unsupported format version: {version!r}"}],
        )

    try:
        doc = ExportDocument.model_validate(data)
    except ValidationError as e:
        raise ImportDocumentError(
            "Invalid file",
            errors=[
                {"loc": list(err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ],
        ) from e

    return doc.projects


async def import_document(workspace: Workspace, raw: str | bytes) -> list[Project]:
    """校验后整体替换 Workspace 中的项目集合

    校验失败时 Workspace 保持原样。
    """
    projects = parse_document(raw)
    await workspace.replace_projects(projects)
    return projects
