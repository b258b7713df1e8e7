"""导出 / 导入文档模型

文档结构：{"projects": [Project...], "v": 1}
"""

from pydantic import BaseModel, Field

from ..config import EXPORT_FORMAT_VERSION
from .project import Project


class ExportDocument(BaseModel):
    """项目集合导出文档"""

    projects: list[Project] = Field(description="全部项目")
    v: int = Field(default=EXPORT_FORMAT_VERSION, description="格式版本")
