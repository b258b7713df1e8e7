"""Project 模型单元测试

验证默认值、None 归一化、未知阶段归入 Initiation、风险评分、Standup 不可变。
"""

import pytest
from pmcopilot.core.models import (
    PATCHABLE_FIELDS,
    PHASES,
    ExportDocument,
    Level,
    Phase,
    Project,
    Risk,
    Standup,
    Task,
    TaskStatus,
    coerce_phase,
)
from pydantic import ValidationError


class TestEnums:
    def test_phase_order(self):
        assert [p.value for p in PHASES] == [
            "Initiation",
            "Planning",
            "Execution",
            "Monitoring",
            "Closure",
        ]

    def test_level_ordinals(self):
        assert Level.LOW.ordinal == 1
        assert Level.MEDIUM.ordinal == 2
        assert Level.HIGH.ordinal == 3

    @pytest.mark.parametrize("value", ["Bogus", "", None, 3, "planning"])
    def test_unknown_phase_coerced(self, value):
        """无法识别的阶段归入 Initiation"""
        assert coerce_phase(value) == Phase.INITIATION

    def test_known_phase_kept(self):
        assert coerce_phase("Closure") == Phase.CLOSURE


class TestTask:
    def test_defaults(self):
        task = Task(title="Kickoff")
        assert task.status == TaskStatus.TODO
        assert task.phase == Phase.INITIATION
        assert task.start == ""
        assert task.due == ""
        assert task.id

    def test_ids_are_unique(self):
        assert Task().id != Task().id

    def test_unknown_phase_on_ingest(self):
        task = Task.model_validate({"id": "t1", "title": "x", "phase": "Bogus"})
        assert task.phase == Phase.INITIATION

    def test_none_dates_normalised(self):
        task = Task.model_validate({"title": "x", "start": None, "due": None})
        assert task.start == ""
        assert task.due == ""
        assert task.has_dates is False

    def test_no_date_ordering_constraint(self):
        """start 晚于 due 也被接受"""
        task = Task(title="x", start="2024-06-01", due="2024-05-01")
        assert task.has_dates is True

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            Task(title="x", status="blocked")


class TestRisk:
    @pytest.mark.parametrize(
        ("impact", "likelihood", "expected"),
        [
            (Level.HIGH, Level.HIGH, 9),
            (Level.HIGH, Level.MEDIUM, 6),
            (Level.MEDIUM, Level.MEDIUM, 4),
            (Level.HIGH, Level.LOW, 3),
            (Level.LOW, Level.LOW, 1),
        ],
    )
    def test_score(self, impact, likelihood, expected):
        assert Risk(title="r", impact=impact, likelihood=likelihood).score == expected

    def test_defaults(self):
        risk = Risk(title="r")
        assert risk.impact == Level.MEDIUM
        assert risk.likelihood == Level.MEDIUM
        assert risk.open is True
        assert risk.mitigation == ""


class TestStandup:
    def test_frozen(self):
        standup = Standup(yesterday="a", today="b", blockers="c")
        with pytest.raises(ValidationError):
            standup.today = "changed"

    def test_date_defaults_to_utc_today(self):
        from datetime import UTC, datetime

        assert Standup().date == datetime.now(UTC).date().isoformat()


class TestProject:
    def test_defaults(self):
        project = Project()
        assert project.name == ""
        assert project.stakeholders == []
        assert project.tasks == []
        assert project.risks == []
        assert project.standups == []

    def test_none_fields_normalised(self):
        project = Project.model_validate(
            {
                "id": "p1",
                "name": None,
                "start": None,
                "end": None,
                "goals": None,
                "stakeholders": None,
                "tasks": None,
            }
        )
        assert project.start == ""
        assert project.end == ""
        assert project.stakeholders == []
        assert project.tasks == []

    def test_stakeholders_keep_duplicates_and_order(self):
        project = Project(stakeholders=["B", "A", "B"])
        assert project.stakeholders == ["B", "A", "B"]

    def test_id_not_patchable(self):
        assert "id" not in PATCHABLE_FIELDS
        assert {"name", "tasks", "risks", "standups"} <= PATCHABLE_FIELDS

    def test_json_roundtrip_preserves_nested(self):
        project = Project(
            name="Launch",
            tasks=[Task(title="Kickoff", status=TaskStatus.DONE)],
            risks=[Risk(title="r", impact=Level.HIGH)],
            standups=[Standup(today="write docs")],
        )
        restored = Project.model_validate_json(project.model_dump_json())
        assert restored == project


class TestExportDocument:
    def test_default_version(self):
        assert ExportDocument(projects=[]).v == 1
