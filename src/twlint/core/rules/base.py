"""
規則抽象基類

每條規則提供 check()（回報問題）與 fix()（回傳修正後全文）。
需要先轉換文本再比對的規則可覆寫 preprocess()，並以 PositionMapper
把位置映回原文。
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from twlint.core.types import Issue, TextProcessingContext


class BaseRule(ABC):
    """
    規則基底類別

    子類實現:
    - SimplifiedCharsRule: 簡體字檢測（整段簡轉繁修正）
    - MainlandTermsRule: 大陸用語檢測（依詞庫替換）
    """

    name: str = "base"

    def preprocess(self, text: str) -> TextProcessingContext:
        return TextProcessingContext(original_text=text, processed_text=text)

    @abstractmethod
    def check(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> List[Issue]:
        """
        回報文本中的問題

        Args:
            text: 原文
            dictionaries: 本次要使用的詞庫名稱（不需要詞庫的規則忽略此參數）
        """

    def fix(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> str:
        """回傳修正後全文；預設不修正"""
        return text

    @property
    def fixable(self) -> bool:
        return type(self).fix is not BaseRule.fix

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
