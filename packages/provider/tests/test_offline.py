"""OfflineResponder 单元测试

验证关键词优先级（risk → schedule → stakeholder）、大小写不敏感、通用提示。
"""

import pytest
from pmcopilot.provider.models import ChatRequest
from pmcopilot.provider.offline import (
    GENERIC_TIP,
    KEYWORD_TIPS,
    OfflineResponder,
    match_category,
)

RISK_TIP = KEYWORD_TIPS[0][2]
SCHEDULE_TIP = KEYWORD_TIPS[1][2]
STAKEHOLDER_TIP = KEYWORD_TIPS[2][2]


class TestMatchCategory:
    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("How do I handle RISK?", "risk"),
            ("リスクが心配", "risk"),
            ("Timeline review", "schedule"),
            ("gantt chart", "schedule"),
            ("スプリント計画", "schedule"),
            ("スケジュールを作りたい", "schedule"),
            ("Stakeholder map", "stakeholder"),
            ("ステークホルダー分析", "stakeholder"),
            ("hello", None),
            ("", None),
        ],
    )
    def test_categories(self, message, expected):
        assert match_category(message) == expected

    def test_risk_has_priority(self):
        """同时命中多个类别时按优先级取第一个"""
        assert match_category("stakeholder risk on the timeline") == "risk"

    def test_schedule_before_stakeholder(self):
        assert match_category("stakeholder timeline") == "schedule"


class TestOfflineResponder:
    def test_reply_texts(self):
        responder = OfflineResponder()
        assert responder.reply("what about risk?") == RISK_TIP
        assert responder.reply("Gantt please") == SCHEDULE_TIP
        assert responder.reply("STAKEHOLDER list") == STAKEHOLDER_TIP
        assert responder.reply("hello") == GENERIC_TIP

    def test_none_message(self):
        assert OfflineResponder().reply(None) == GENERIC_TIP

    def test_risk_tip_text(self):
        assert RISK_TIP.startswith("影響(Impact)×発生確率(Likelihood)")

    async def test_ask_returns_result(self):
        result = await OfflineResponder().ask(ChatRequest(message="risk"))
        assert result.content == RISK_TIP
        assert result.provider == "offline"
        assert result.is_fallback is False
