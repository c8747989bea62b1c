"""
原文 / 轉換後文本的位置對照

比對在轉換後（繁體化）的文本上進行，但回報的行欄必須指向原文。
逐行、逐字對齊兩份文本，每行只對齊到較短那行的長度；查詢時以
「最接近的已記錄位移」回推。轉換為逐字 1:1 時結果精確，長度有變動時
只是近似值。
"""

from bisect import bisect_left
from typing import List

from twlint.core.types import TextPosition


class PositionMapper:
    def __init__(self, original_text: str, converted_text: str):
        self.original_text = original_text
        self.converted_text = converted_text
        self._original: List[TextPosition] = []
        self._converted: List[TextPosition] = []
        self._build_mappings()

    def _build_mappings(self) -> None:
        original_lines = self.original_text.split("\n")
        converted_lines = self.converted_text.split("\n")

        original_offset = 0
        converted_offset = 0
        for line_index in range(max(len(original_lines), len(converted_lines))):
            original_line = original_lines[line_index] if line_index < len(original_lines) else ""
            converted_line = converted_lines[line_index] if line_index < len(converted_lines) else ""

            for char_index in range(min(len(original_line), len(converted_line))):
                self._original.append(
                    TextPosition(line_index + 1, char_index + 1, original_offset + char_index)
                )
                self._converted.append(
                    TextPosition(line_index + 1, char_index + 1, converted_offset + char_index)
                )

            original_offset += len(original_line) + 1
            converted_offset += len(converted_line) + 1

    def __len__(self) -> int:
        return len(self._original)

    @staticmethod
    def _offset_of(text: str, line: int, column: int) -> int:
        lines = text.split("\n")
        offset = 0
        for i in range(min(line - 1, len(lines))):
            offset += len(lines[i]) + 1
        current = lines[line - 1] if 0 < line <= len(lines) else ""
        return offset + max(0, min(column - 1, len(current)))

    @staticmethod
    def _nearest(source: List[TextPosition], offset: int) -> int:
        """source 依 offset 遞增；回傳最接近者的索引（平手取前者）"""
        pos = bisect_left(source, offset, key=_offset_key)
        if pos == 0:
            return 0
        if pos >= len(source):
            return len(source) - 1
        before = source[pos - 1]
        after = source[pos]
        return pos - 1 if offset - before.offset <= after.offset - offset else pos

    def _map(self, source: List[TextPosition], target: List[TextPosition], offset: int) -> TextPosition:
        if not source:
            return TextPosition(1, 1, 0)
        return target[self._nearest(source, offset)]

    def map_to_original(self, line: int, column: int) -> TextPosition:
        """轉換後文本的 (行, 欄) -> 原文位置"""
        offset = self._offset_of(self.converted_text, line, column)
        return self._map(self._converted, self._original, offset)

    def map_to_converted(self, line: int, column: int) -> TextPosition:
        """原文的 (行, 欄) -> 轉換後文本位置"""
        offset = self._offset_of(self.original_text, line, column)
        return self._map(self._original, self._converted, offset)

    def original_offset(self, converted_offset: int) -> int:
        """轉換後文本的字元位移 -> 原文字元位移"""
        return self._map(self._converted, self._original, converted_offset).offset


def _offset_key(position: TextPosition) -> int:
    return position.offset
