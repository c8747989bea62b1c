"""
重疊候選的消解

排序鍵：長度降冪 → 信心度降冪 → 起點升冪（穩定排序，完全平手時保留先加入者）。
依序貪婪接受與既有結果不重疊的候選，最後依起點排序輸出。

兩種佔用檢查實作，結果必須完全一致：
- bitmap: 每個字元位置一格，O(L) 標記，適合一般文本
- intervals: 已接受區間的有序串列 + 二分搜尋，超大文本時避免配置整段 bitmap
"""

from bisect import bisect_left, insort
from typing import Iterable, List, Optional, Sequence

from twlint.core.types import MatchResult

BITMAP_MAX_TEXT_LENGTH = 2_000_000


def priority_key(match: MatchResult):
    return (-match.length, -match.confidence, match.start)


def _select_with_bitmap(ordered: Sequence[MatchResult], text_length: int) -> List[MatchResult]:
    occupied = bytearray(text_length)
    accepted: List[MatchResult] = []
    for match in ordered:
        if occupied.find(1, match.start, match.end) != -1:
            continue
        occupied[match.start:match.end] = b"\x01" * match.length
        accepted.append(match)
    return accepted


def _select_with_intervals(ordered: Sequence[MatchResult]) -> List[MatchResult]:
    starts: List[int] = []
    spans: List[tuple] = []
    accepted: List[MatchResult] = []
    for match in ordered:
        pos = bisect_left(starts, match.start)
        # 只需檢查左右兩個鄰居：已接受的區間彼此不重疊
        if pos > 0 and spans[pos - 1][1] > match.start:
            continue
        if pos < len(spans) and spans[pos][0] < match.end:
            continue
        insort(starts, match.start)
        spans.insert(pos, (match.start, match.end))
        accepted.append(match)
    return accepted


def resolve_overlaps(
    candidates: Iterable[MatchResult],
    text_length: Optional[int] = None,
    *,
    method: str = "auto",
) -> List[MatchResult]:
    """
    將候選池消解為不重疊、依位置排序的結果

    Args:
        candidates: 所有候選（順序即平手時的先後）
        text_length: 文本長度；未提供時以候選最大 end 推得
        method: "auto" | "bitmap" | "intervals"
    """
    ordered = sorted((c for c in candidates if c.end > c.start), key=priority_key)
    if not ordered:
        return []

    if text_length is None:
        text_length = max(c.end for c in ordered)
    else:
        text_length = max(text_length, max(c.end for c in ordered))

    if method == "auto":
        method = "bitmap" if text_length <= BITMAP_MAX_TEXT_LENGTH else "intervals"

    if method == "bitmap":
        accepted = _select_with_bitmap(ordered, text_length)
    elif method == "intervals":
        accepted = _select_with_intervals(ordered)
    else:
        raise ValueError(f"Unknown selection method: {method!r}")

    accepted.sort(key=lambda m: m.start)
    return accepted
