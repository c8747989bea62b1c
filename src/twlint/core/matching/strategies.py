"""
比對策略

三種策略都只負責「在文本中找出某一個詞的所有合法位置」，與詞庫無關：

- exact: 逐一子字串搜尋，每次從上一個命中起點 +1 繼續，
  因此相鄰或自我重疊的同一個詞都會各自被找到
- word_boundary: 中文沒有空白分詞，改以「前後一個字元都不是 CJK 漢字」作為邊界
- context_sensitive: 未設定 before/after 時退化為 word_boundary；
  否則以較寬的視窗（±50 字元）驗證上下文規則

策略集合是封閉的，以 MatchStrategyType 查表取得，不做動態註冊。
"""

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, List, Optional

from twlint.core.types import ContextRule, MatchCandidate, MatchStrategyType

DEFAULT_WINDOW = 20
CONTEXT_WINDOW = 50

_CJK_CLASS = r"[\u4e00-\u9fff]"


def validate_context(text: str, term: str, index: int, context: Optional[ContextRule], window: int) -> bool:
    """
    共用的上下文驗證

    1. exclude 任一出現在「前視窗 + 詞 + 後視窗」即排除
    2. 有 before 時，前視窗必須包含其一
    3. 有 after 時，後視窗必須包含其一
    """
    if not context:
        return True

    end = index + len(term)
    before_text = text[max(0, index - window):index]
    after_text = text[end:end + window]

    if context.exclude:
        surrounding = before_text + term + after_text
        if any(pattern in surrounding for pattern in context.exclude):
            return False

    if context.before and not any(pattern in before_text for pattern in context.before):
        return False

    if context.after and not any(pattern in after_text for pattern in context.after):
        return False

    return True


def iter_occurrences(text: str, term: str):
    """所有字面出現位置（允許重疊）"""
    if not term:
        return
    index = text.find(term)
    while index != -1:
        yield index
        index = text.find(term, index + 1)


@lru_cache(maxsize=4096)
def _boundary_pattern(term: str) -> "re.Pattern[str]":
    return re.compile(f"(?<!{_CJK_CLASS}){re.escape(term)}(?!{_CJK_CLASS})")


class MatchStrategy(ABC):
    """比對策略基底類別"""

    kind: MatchStrategyType
    confidence: float = 1.0
    window: int = DEFAULT_WINDOW

    @abstractmethod
    def match(self, text: str, term: str, context: Optional[ContextRule] = None) -> List[MatchCandidate]:
        pass

    def _candidate(self, term: str, index: int) -> MatchCandidate:
        return MatchCandidate(
            term=term,
            start=index,
            end=index + len(term),
            confidence=self.confidence,
            strategy=self.kind,
        )


class ExactMatchStrategy(MatchStrategy):
    kind = MatchStrategyType.EXACT
    confidence = 1.0

    def match(self, text, term, context=None):
        return [
            self._candidate(term, index)
            for index in iter_occurrences(text, term)
            if validate_context(text, term, index, context, self.window)
        ]


class WordBoundaryStrategy(MatchStrategy):
    kind = MatchStrategyType.WORD_BOUNDARY
    confidence = 0.9

    def match(self, text, term, context=None):
        if not term:
            return []
        return [
            self._candidate(term, m.start())
            for m in _boundary_pattern(term).finditer(text)
            if validate_context(text, term, m.start(), context, self.window)
        ]


class ContextSensitiveStrategy(MatchStrategy):
    kind = MatchStrategyType.CONTEXT_SENSITIVE
    confidence = 0.8
    window = CONTEXT_WINDOW

    def __init__(self, fallback: Optional[MatchStrategy] = None):
        self._fallback = fallback or WordBoundaryStrategy()

    def match(self, text, term, context=None):
        if context is None or not context.has_inclusion:
            return self._fallback.match(text, term, context)

        return [
            self._candidate(term, index)
            for index in iter_occurrences(text, term)
            if validate_context(text, term, index, context, self.window)
        ]


STRATEGIES: Dict[MatchStrategyType, MatchStrategy] = {
    MatchStrategyType.EXACT: ExactMatchStrategy(),
    MatchStrategyType.WORD_BOUNDARY: WordBoundaryStrategy(),
    MatchStrategyType.CONTEXT_SENSITIVE: ContextSensitiveStrategy(),
}


def get_strategy(kind) -> MatchStrategy:
    """依名稱或列舉取得策略；None 視為 exact"""
    return STRATEGIES[MatchStrategyType.parse(kind)]
