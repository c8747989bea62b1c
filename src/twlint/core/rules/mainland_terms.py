"""
大陸用語規則

流程:
1. 先把原文簡轉繁（詞庫以繁體/混合寫法為鍵），並建立位置對照
2. 在轉換後文本上呼叫比對引擎
3. 略過 term == replacement 的佔位結果（它們只用來擋住較短的誤判）
4. autofix_safe 的結果為 warning、可修正；其餘為 info、僅提示

修正時只套用 autofix_safe 的結果，並從文本尾端往前替換，
前面的替換不會讓後面尚未處理的位移失效。
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

from twlint.config import MAINLAND_TERMS_RULE
from twlint.core.converter import Converter, get_default_converter
from twlint.core.position_mapper import PositionMapper
from twlint.core.types import (
    Issue,
    MatchResult,
    MatchStrategyType,
    Severity,
    TextProcessingContext,
    offset_to_line_column,
)
from twlint.utils.logger import get_logger

from .base import BaseRule

if TYPE_CHECKING:
    from twlint.core.dictionary_manager import DictionaryManager


class MainlandTermsRule(BaseRule):
    name = MAINLAND_TERMS_RULE

    def __init__(self, dictionary_manager: "DictionaryManager", converter: Optional[Converter] = None):
        self._manager = dictionary_manager
        self._converter = converter or get_default_converter()
        self._logger = get_logger("rule.mainland-terms")

    def preprocess(self, text: str) -> TextProcessingContext:
        converted = self._converter(text)
        if converted == text:
            return TextProcessingContext(original_text=text, processed_text=text)
        return TextProcessingContext(
            original_text=text,
            processed_text=converted,
            position_mapper=PositionMapper(text, converted),
        )

    def _find(self, context: TextProcessingContext, dictionaries: Optional[Sequence[str]]) -> List[MatchResult]:
        matches = self._manager.find_text(context.processed_text, dictionaries)
        return [m for m in matches if not m.is_identity]

    @staticmethod
    def _message(match: MatchResult) -> str:
        if match.strategy is MatchStrategyType.CONTEXT_SENSITIVE:
            return f"可能為大陸用語 '{match.term}'，請確認上下文；臺灣用語為 '{match.replacement}'"
        return f"大陸用語 '{match.term}' 建議使用臺灣用語 '{match.replacement}'"

    def check(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> List[Issue]:
        context = self.preprocess(text)
        issues: List[Issue] = []

        for match in self._find(context, dictionaries):
            line, column = offset_to_line_column(context.processed_text, match.start)
            if context.position_mapper is not None:
                position = context.position_mapper.map_to_original(line, column)
                line, column = position.line, position.column

            issues.append(
                Issue(
                    line=line,
                    column=column,
                    message=self._message(match),
                    severity=Severity.WARNING if match.autofix_safe else Severity.INFO,
                    rule=self.name,
                    suggestions=[match.replacement],
                    fixable=match.autofix_safe,
                )
            )

        return issues

    def fix(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> str:
        context = self.preprocess(text)
        edits = [m for m in self._find(context, dictionaries) if m.autofix_safe]
        edits.sort(key=lambda m: m.start, reverse=True)

        fixed = text
        for match in edits:
            start = match.start
            if context.position_mapper is not None:
                start = context.position_mapper.original_offset(match.start)
            end = start + match.length
            fixed = fixed[:start] + match.replacement + fixed[end:]

        if edits:
            self._logger.debug(f"Applied {len(edits)} replacements")
        return fixed
