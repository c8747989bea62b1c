"""
簡體字規則

逐行做簡轉繁；轉換後與原文不同的行，逐字比對（簡→繁在此領域為 1:1），
每個不同的字元回報一個 error 等級、可自動修正的問題。
"""

from typing import List, Optional, Sequence

from twlint.config import SIMPLIFIED_CHARS_RULE
from twlint.core.converter import Converter, get_default_converter
from twlint.core.types import Issue, Severity

from .base import BaseRule


class SimplifiedCharsRule(BaseRule):
    name = SIMPLIFIED_CHARS_RULE

    def __init__(self, converter: Optional[Converter] = None):
        self._converter = converter or get_default_converter()

    def check(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> List[Issue]:
        issues: List[Issue] = []
        for line_index, line in enumerate(text.split("\n")):
            converted = self._converter(line)
            if converted == line:
                continue

            for column, (simplified, traditional) in enumerate(zip(line, converted)):
                if simplified == traditional:
                    continue
                issues.append(
                    Issue(
                        line=line_index + 1,
                        column=column + 1,
                        message=f"簡體字 '{simplified}' 建議使用繁體字 '{traditional}'",
                        severity=Severity.ERROR,
                        rule=self.name,
                        suggestions=[traditional],
                        fixable=True,
                    )
                )
        return issues

    def fix(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> str:
        return self._converter(text)
