"""CLI 入口模块 -- python -m pmcopilot.core <command>

支持的命令：
  show              列出本地保存的项目
  export [path]     导出全部项目（默认 pm-copilot-YYYY-MM-DD.json）
  import <path>     从导出文件整体替换本地项目
"""

import asyncio
import sys
from pathlib import Path

from .config import get_db_path

_USAGE = """用法: python -m pmcopilot.core <command>
命令:
  show              列出本地保存的项目
  export [path]     导出全部项目
  import <path>     从导出文件整体替换本地项目"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "show":
        asyncio.run(show())
    elif command == "export":
        target = sys.argv[2] if len(sys.argv) > 2 else None
        asyncio.run(export(target))
    elif command == "import":
        if len(sys.argv) < 3:
            print("缺少导入文件路径")
            sys.exit(1)
        code = asyncio.run(import_(sys.argv[2]))
        sys.exit(code)
    else:
        print(f"未知命令: {command}")
        print("可用命令: show, export, import")
        sys.exit(1)


async def show() -> None:
    """列出项目"""
    from .boards import completion_percentage
    from .store import create_store
    from .workspace import Workspace

    store = await create_store(get_db_path())
    try:
        workspace = await Workspace.load(store)
    finally:
        await store.close()

    if not workspace.projects:
        print("还没有项目")
        return
    for project in workspace.projects:
        marker = "*" if project.id == workspace.active_id else " "
        print(
            f"{marker} {project.id}  {project.name}  "
            f"tasks={len(project.tasks)} done={completion_percentage(project.tasks)}% "
            f"risks={len(project.risks)} standups={len(project.standups)}"
        )


async def export(target: str | None) -> None:
    """导出到文件"""
    from .store import create_store
    from .transfer import dump_document, export_filename
    from .workspace import Workspace

    store = await create_store(get_db_path())
    try:
        workspace = await Workspace.load(store)
    finally:
        await store.close()

    path = Path(target or export_filename())
    path.write_text(dump_document(workspace.projects), encoding="utf-8")
    print(f"已导出 {len(workspace.projects)} 个项目: {path}")


async def import_(source: str) -> int:
    """从文件导入，校验失败时不修改本地数据"""
    from .exceptions import ImportDocumentError
    from .store import create_store
    from .transfer import import_document
    from .workspace import open_workspace

    raw = Path(source).read_text(encoding="utf-8")
    store = await create_store(get_db_path())
    try:
        workspace = await open_workspace(store)
        try:
            projects = await import_document(workspace, raw)
        except ImportDocumentError as e:
            print(f"导入失败: {e}")
            for err in e.errors:
                loc = ".".join(str(part) for part in err["loc"]) or "(root)"
                print(f"  {loc}: {err['msg']}")
            return 1
    finally:
        await store.close()

    print(f"已导入 {len(projects)} 个项目")
    return 0


if __name__ == "__main__":
    main()
