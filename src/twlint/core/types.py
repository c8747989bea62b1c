"""
資料模型

詞庫詞條、比對候選、比對結果與 lint 問題的統一資料結構。
位置一律為半開區間 [start, end)，以字元為單位、從 0 起算；
Issue 的行/欄則從 1 起算。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from twlint.core.position_mapper import PositionMapper


class MatchStrategyType(str, Enum):
    """比對策略（封閉集合）"""
    EXACT = "exact"
    WORD_BOUNDARY = "word_boundary"
    CONTEXT_SENSITIVE = "context_sensitive"

    @classmethod
    def parse(cls, value: Any) -> "MatchStrategyType":
        """未指定時預設為 exact；未知值視為錯誤"""
        if value is None or value == "":
            return cls.EXACT
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            raise ValueError(f"Unknown match strategy: {value!r}") from None


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ContextRule:
    """
    上下文規則

    Attributes:
        before: 比對位置前方視窗內必須出現其一
        after: 比對位置後方視窗內必須出現其一
        exclude: 前後視窗（含詞本身）出現任一即排除

    空串列與 None 同義：該項檢查略過。
    """
    before: Tuple[str, ...] = ()
    after: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ContextRule"]:
        if not data:
            return None
        rule = cls(
            before=tuple(data.get("before") or ()),
            after=tuple(data.get("after") or ()),
            exclude=tuple(data.get("exclude") or ()),
        )
        return rule if rule else None

    def to_dict(self) -> Dict[str, List[str]]:
        data: Dict[str, List[str]] = {}
        if self.before:
            data["before"] = list(self.before)
        if self.after:
            data["after"] = list(self.after)
        if self.exclude:
            data["exclude"] = list(self.exclude)
        return data

    @property
    def has_inclusion(self) -> bool:
        return bool(self.before or self.after)

    def __bool__(self) -> bool:
        return bool(self.before or self.after or self.exclude)


@dataclass(frozen=True)
class DictLookupEntry:
    """單一詞條的替換資訊"""
    replacement: str
    confidence: float = 1.0
    category: str = ""
    reason: str = ""
    match_strategy: MatchStrategyType = MatchStrategyType.EXACT
    context: Optional[ContextRule] = None
    autofix_safe: bool = False

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0.0 and 1.0, got {self.confidence}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DictLookupEntry":
        return cls(
            replacement=data["taiwan"],
            confidence=float(data.get("confidence", 1.0)),
            category=data.get("category", "") or "",
            reason=data.get("reason", "") or "",
            match_strategy=MatchStrategyType.parse(data.get("match_type")),
            context=ContextRule.from_dict(data.get("context")),
            autofix_safe=bool(data.get("autofix_safe", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "taiwan": self.replacement,
            "confidence": self.confidence,
            "category": self.category,
            "reason": self.reason,
            "match_type": self.match_strategy.value,
            "autofix_safe": self.autofix_safe,
        }
        if self.context:
            data["context"] = self.context.to_dict()
        return data


@dataclass(frozen=True)
class MatchCandidate:
    """策略輸出的原始候選（尚未附加替換資訊）"""
    term: str
    start: int
    end: int
    confidence: float
    strategy: MatchStrategyType

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class MatchResult:
    """引擎最終輸出"""
    term: str
    replacement: str
    start: int
    end: int
    confidence: float
    rule: str
    strategy: MatchStrategyType = MatchStrategyType.EXACT
    autofix_safe: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_identity(self) -> bool:
        """term == replacement：只用來佔位、擋住較短的錯誤比對"""
        return self.term == self.replacement

    def overlaps(self, other: "MatchResult") -> bool:
        return max(self.start, other.start) < min(self.end, other.end)


@dataclass
class Issue:
    line: int
    column: int
    message: str
    severity: Severity
    rule: str
    suggestions: List[str] = field(default_factory=list)
    fixable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "severity": self.severity.value,
            "rule": self.rule,
            "suggestions": list(self.suggestions),
            "fixable": self.fixable,
        }


@dataclass
class LintResult:
    """
    單一檔案的檢查結果

    output 只有 fix 流程才會填入（修正後全文）。
    """
    file_path: str
    messages: List[Issue] = field(default_factory=list)
    output: Optional[str] = None

    @property
    def error_count(self) -> int:
        return sum(1 for m in self.messages if m.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for m in self.messages if m.severity is Severity.WARNING)


@dataclass(frozen=True)
class TextPosition:
    line: int
    column: int
    offset: int


@dataclass
class TextProcessingContext:
    original_text: str
    processed_text: str
    position_mapper: Optional["PositionMapper"] = None


def offset_to_line_column(text: str, offset: int) -> Tuple[int, int]:
    """將字元位移轉為 1 起算的 (行, 欄)"""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1
