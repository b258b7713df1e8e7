"""导入 / 导出测试

验证：
1. 导出格式 {projects, v: 1} 与文件名
2. 导出 → 导入 后项目完全一致
3. 非法文档被拒绝且状态不变
"""

import json
from datetime import date

import pytest
from pmcopilot.core.exceptions import ImportDocumentError
from pmcopilot.core.models import Level, Project, Risk, Standup, Task, TaskStatus
from pmcopilot.core.transfer import (
    dump_document,
    export_document,
    export_filename,
    import_document,
    parse_document,
)
from pmcopilot.core.workspace import open_workspace


@pytest.fixture
def sample_projects() -> list[Project]:
    return [
        Project(
            name="Launch",
            goals="Ship v1",
            start="2024-05-01",
            end="2024-06-30",
            stakeholders=["Owner", "Dev"],
            tasks=[Task(title="Kickoff", status=TaskStatus.DONE)],
            risks=[Risk(title="Vendor delay", impact=Level.HIGH, open=False)],
            standups=[Standup(date="2024-05-02", today="plan")],
        ),
        Project(name="Empty"),
    ]


class TestExport:
    def test_document_shape(self, sample_projects):
        data = json.loads(dump_document(sample_projects))
        assert data["v"] == 1
        assert [p["name"] for p in data["projects"]] == ["Launch", "Empty"]

    def test_pretty_printed(self, sample_projects):
        assert "\n  " in dump_document(sample_projects)

    def test_unicode_kept(self):
        text = dump_document([Project(name="新規プロジェクト")])
        assert "新規プロジェクト" in text

    def test_filename(self):
        assert export_filename(date(2024, 5, 1)) == "pm-copilot-2024-05-01.json"

    def test_export_document_model(self, sample_projects):
        doc = export_document(sample_projects)
        assert doc.v == 1
        assert doc.projects == sample_projects


class TestParse:
    def test_roundtrip(self, sample_projects):
        assert parse_document(dump_document(sample_projects)) == sample_projects

    def test_missing_version_accepted(self):
        projects = parse_document(json.dumps({"projects": [{"id": "p1", "name": "A"}]}))
        assert projects[0].id == "p1"

    def test_empty_projects_list(self):
        assert parse_document('{"projects": [], "v": 1}') == []

    def test_unknown_phase_coerced(self):
        raw = json.dumps(
            {"projects": [{"id": "p1", "tasks": [{"id": "t1", "phase": "Later"}]}]}
        )
        assert parse_document(raw)[0].tasks[0].phase == "Initiation"

    @pytest.mark.parametrize(
        ("raw", "loc"),
        [
            ("{not json", []),
            ("[]", ["projects"]),
            ('{"v": 1}', ["projects"]),
            ('{"projects": "nope"}', ["projects"]),
            ('{"projects": [], "v": 2}', ["v"]),
        ],
    )
    def test_rejected(self, raw, loc):
        with pytest.raises(ImportDocumentError) as exc_info:
            parse_document(raw)
        assert str(exc_info.value) == "Invalid file"
        assert exc_info.value.errors[0]["loc"] == loc

    def test_schema_errors_are_structured(self):
        raw = json.dumps({"projects": [{"id": "p1", "tasks": [{"status": "blocked"}]}]})
        with pytest.raises(ImportDocumentError) as exc_info:
            parse_document(raw)
        loc = exc_info.value.errors[0]["loc"]
        assert loc[:4] == ["projects", 0, "tasks", 0]


class TestImport:
    async def test_replaces_and_selects_first(self, memory_store, sample_projects):
        workspace = await open_workspace(memory_store)
        await workspace.create_project()

        imported = await import_document(workspace, dump_document(sample_projects))

        assert imported == sample_projects
        assert workspace.projects == sample_projects
        assert workspace.active_id == sample_projects[0].id

    async def test_empty_import_clears_active(self, memory_store):
        workspace = await open_workspace(memory_store)
        await workspace.create_project()

        await import_document(workspace, '{"projects": [], "v": 1}')

        assert workspace.projects == []
        assert workspace.active_id == ""

    async def test_invalid_import_leaves_state_unchanged(self, memory_store):
        workspace = await open_workspace(memory_store)
        project = await workspace.create_project()
        stored_before = await memory_store.get("pmc_projects")

        with pytest.raises(ImportDocumentError):
            await import_document(workspace, '{"projects": [{"tasks": 5}]}')

        assert [p.id for p in workspace.projects] == [project.id]
        assert workspace.active_id == project.id
        assert await memory_store.get("pmc_projects") == stored_before
