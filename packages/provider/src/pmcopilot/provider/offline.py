"""OfflineResponder -- 纯离线的关键词应答

/api/chat 不可用时的降级后备：按固定优先级（risk → schedule →
stakeholder）匹配消息中的关键词，返回对应的固定建议；都不匹配时返回
通用提示。不会抛出异常，总是返回字符串。
"""

import re
import time

from .models import ChatRequest, ModelCallResult

# (类别, 匹配模式, 固定建议)，按优先级排列
KEYWORD_TIPS: tuple[tuple[str, re.Pattern[str], str], ...] = (
    (
        "risk",
        re.compile(r"risk|リスク", re.IGNORECASE),
        "影響(Impact)×発生確率(Likelihood)で優先度を決めましょう。"
        "高×高は即アクション。中〜低はトリガーを決めて監視。",
    ),
    (
        "schedule",
        re.compile(r"スケジュール|timeline|gantt|スプリント", re.IGNORECASE),
        "重要マイルストーン→反復→個別タスクの順で粗→細に。レビュー/調達は前倒しに。",
    ),
    (
        "stakeholder",
        re.compile(r"ステークホルダー|stakeholder", re.IGNORECASE),
        "期待値・関心度・影響度で仕分け。高影響×高関心には週次レポート＋早期相談。",
    ),
)

GENERIC_TIP = (
    "（モック応答）/api/chat を実装すると本番AI応答になります。"
    "質問を具体化すると実行手順まで提案します。"
)

_TIP_BY_CATEGORY: dict[str, str] = {category: tip for category, _pattern, tip in KEYWORD_TIPS}


def match_category(message: str) -> str | None:
    """返回第一个匹配的关键词类别，无匹配时返回 None"""
    for category, pattern, _tip in KEYWORD_TIPS:
        if pattern.search(message):
            return category
    return None


class OfflineResponder:
    """离线关键词应答器"""

    def reply(self, message: str | None) -> str:
        """按关键词返回固定建议"""
        category = match_category(message or "")
        if category is None:
            return GENERIC_TIP
        return _TIP_BY_CATEGORY[category]

    async def ask(self, request: ChatRequest) -> ModelCallResult:
        """ChatRequest 接口适配，供 FallbackManager 作为后备使用"""
        start_time = time.monotonic()
        content = self.reply(request.message)
        return ModelCallResult(
            content=content,
            model_name="offline",
            provider="offline",
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
