"""
比對策略測試

exact / word_boundary / context_sensitive 三種策略與共用的上下文驗證。
"""

import pytest

from twlint.core.matching.strategies import (
    CONTEXT_WINDOW,
    DEFAULT_WINDOW,
    ContextSensitiveStrategy,
    ExactMatchStrategy,
    WordBoundaryStrategy,
    get_strategy,
    validate_context,
)
from twlint.core.types import ContextRule, MatchStrategyType


def starts(candidates):
    return [c.start for c in candidates]


class TestExactMatch:
    """exact 策略"""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.strategy = ExactMatchStrategy()

    def test_finds_every_occurrence(self):
        """測試所有出現位置都被找到"""
        result = self.strategy.match("軟件和軟件", "軟件")
        assert starts(result) == [0, 3]
        assert all(c.end - c.start == 2 for c in result)

    def test_self_overlapping_occurrences(self):
        """測試同一個詞自我重疊時每個起點都會回報"""
        assert starts(self.strategy.match("aaa", "aa")) == [0, 1]

    def test_confidence_and_kind(self):
        """測試信心度與策略種類"""
        candidate = self.strategy.match("軟件", "軟件")[0]
        assert candidate.confidence == 1.0
        assert candidate.strategy is MatchStrategyType.EXACT

    def test_matches_inside_longer_cjk_run(self):
        """測試 exact 不檢查邊界"""
        assert starts(self.strategy.match("軟件工程", "軟件")) == [0]

    def test_empty_term(self):
        """測試空詞不會無窮迴圈"""
        assert self.strategy.match("任何文字", "") == []

    def test_context_applies(self):
        """測試 exact 也會套用上下文規則"""
        context = ContextRule(exclude=("法律程序",))
        assert self.strategy.match("依法律程序辦理", "程序", context) == []
        assert starts(self.strategy.match("執行程序", "程序", context)) == [2]


class TestWordBoundary:
    """word_boundary 策略"""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.strategy = WordBoundaryStrategy()

    def test_rejects_inside_cjk_run(self):
        """測試詞前後緊鄰漢字時不算命中"""
        assert self.strategy.match("我的軟件很好", "軟件") == []

    def test_accepts_with_non_cjk_neighbours(self):
        """測試前後為標點、空白或英數字時命中"""
        assert starts(self.strategy.match("「軟件」", "軟件")) == [1]
        assert starts(self.strategy.match("用 軟件 做", "軟件")) == [2]
        assert starts(self.strategy.match("Python軟件2", "軟件")) == [6]

    def test_text_edges_are_boundaries(self):
        """測試文本開頭與結尾視為邊界"""
        assert starts(self.strategy.match("軟件", "軟件")) == [0]

    def test_confidence(self):
        """測試信心度"""
        assert self.strategy.match("軟件", "軟件")[0].confidence == 0.9

    def test_special_characters_escaped(self):
        """測試詞中的正規表示式特殊字元被跳脫"""
        assert starts(self.strategy.match("a C++ b", "C++")) == [2]


class TestContextSensitive:
    """context_sensitive 策略"""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.strategy = ContextSensitiveStrategy()

    def test_falls_back_to_word_boundary_without_inclusion(self):
        """測試沒有 before/after 時退化為 word_boundary"""
        assert self.strategy.match("我的質量很好", "質量") == []
        result = self.strategy.match("質量", "質量", ContextRule(exclude=("品質",)))
        assert starts(result) == [0]
        assert result[0].strategy is MatchStrategyType.WORD_BOUNDARY

    def test_requires_context(self):
        """測試有 before 時前方視窗必須包含其一"""
        context = ContextRule(before=("產品",))
        assert starts(self.strategy.match("產品的質量很好", "質量", context)) == [3]
        assert self.strategy.match("物體的質量守恆", "質量", context) == []

    def test_ignores_word_boundary_when_context_present(self):
        """測試有上下文規則時不再檢查漢字邊界"""
        context = ContextRule(after=("保證",))
        assert starts(self.strategy.match("提升質量保證", "質量", context)) == [2]

    def test_confidence(self):
        """測試信心度"""
        context = ContextRule(before=("產品",))
        assert self.strategy.match("產品質量", "質量", context)[0].confidence == 0.8

    def test_wider_window(self):
        """測試視窗比其他策略寬"""
        text = "產品" + "。" * 30 + "質量"
        context = ContextRule(before=("產品",))
        assert ExactMatchStrategy().match(text, "質量", context) == []
        assert starts(self.strategy.match(text, "質量", context)) == [32]


class TestValidateContext:
    """共用上下文驗證"""

    def test_no_rule_always_passes(self):
        """測試沒有規則時永遠通過"""
        assert validate_context("abc", "b", 1, None, DEFAULT_WINDOW)
        assert validate_context("abc", "b", 1, ContextRule(), DEFAULT_WINDOW)

    def test_exclude_covers_term_itself(self):
        """測試 exclude 比對範圍包含詞本身"""
        context = ContextRule(exclude=("行政程序",))
        text = "這是行政程序"
        assert not validate_context(text, "程序", 4, context, DEFAULT_WINDOW)

    def test_before_and_after_both_required(self):
        """測試 before 與 after 都設定時兩者都要滿足"""
        context = ContextRule(before=("編寫",), after=("碼",))
        assert validate_context("編寫程序碼", "程序", 2, context, DEFAULT_WINDOW)
        assert not validate_context("編寫程序", "程序", 2, context, DEFAULT_WINDOW)
        assert not validate_context("程序碼", "程序", 0, context, DEFAULT_WINDOW)

    def test_window_limits(self):
        """測試視窗外的模式不算數"""
        context = ContextRule(after=("守恆",))
        text = "質量" + "，" * DEFAULT_WINDOW + "守恆"
        assert not validate_context(text, "質量", 0, context, DEFAULT_WINDOW)
        assert validate_context(text, "質量", 0, context, CONTEXT_WINDOW)


class TestStrategyLookup:
    """策略查表"""

    def test_default_is_exact(self):
        """測試未指定策略時使用 exact"""
        assert get_strategy(None).kind is MatchStrategyType.EXACT
        assert get_strategy("").kind is MatchStrategyType.EXACT

    def test_by_name_and_enum(self):
        """測試以名稱或列舉取得策略"""
        assert get_strategy("word_boundary").kind is MatchStrategyType.WORD_BOUNDARY
        assert get_strategy(MatchStrategyType.CONTEXT_SENSITIVE).kind is MatchStrategyType.CONTEXT_SENSITIVE

    def test_unknown_strategy(self):
        """測試未知策略名稱會拋出錯誤"""
        with pytest.raises(ValueError, match="Unknown match strategy"):
            get_strategy("fuzzy")
