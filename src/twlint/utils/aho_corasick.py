"""
Aho-Corasick 多詞掃描（無第三方依賴）

用途：詞庫動輒上千個詞條，逐一對全文做子字串搜尋太慢。
先用一次線性掃描找出「實際出現在文本中的詞」，再只對這些詞執行比對策略。
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, Iterator, List, Set, Tuple


class TermAutomaton:
    """
    以詞庫鍵值建構的自動機

    範例：
        >>> automaton = TermAutomaton(["軟體", "體驗"])
        >>> sorted(automaton.terms_in("軟體體驗"))
        ['軟體', '體驗']
    """

    def __init__(self, terms: Iterable[str] = ()) -> None:
        self._goto: List[Dict[str, int]] = [{}]
        self._fail: List[int] = [0]
        self._output: List[List[str]] = [[]]
        self._size = 0
        self._built = False
        for term in terms:
            self.add(term)

    def __len__(self) -> int:
        return self._size

    def add(self, term: str) -> None:
        if self._built:
            raise RuntimeError("TermAutomaton 已 build()，不可再 add()")
        if not term:
            return

        state = 0
        for ch in term:
            nxt = self._goto[state].get(ch)
            if nxt is None:
                nxt = len(self._goto)
                self._goto[state][ch] = nxt
                self._goto.append({})
                self._fail.append(0)
                self._output.append([])
            state = nxt
        if term not in self._output[state]:
            self._output[state].append(term)
            self._size += 1

    def build(self) -> None:
        if self._built:
            return

        queue: deque[int] = deque(self._goto[0].values())
        while queue:
            state = queue.popleft()
            for ch, child in self._goto[state].items():
                queue.append(child)

                fallback = self._fail[state]
                while fallback and ch not in self._goto[fallback]:
                    fallback = self._fail[fallback]
                target = self._goto[fallback].get(ch, 0)
                self._fail[child] = target if target != child else 0
                self._output[child] = self._output[child] + [
                    t for t in self._output[self._fail[child]] if t not in self._output[child]
                ]

        self._built = True

    def iter_spans(self, text: str) -> Iterator[Tuple[int, int, str]]:
        """
        逐一輸出所有（可重疊的）命中

        Yields:
            (start, end, term)，end 不含
        """
        if not self._built:
            self.build()

        state = 0
        for i, ch in enumerate(text):
            while state and ch not in self._goto[state]:
                state = self._fail[state]
            state = self._goto[state].get(ch, 0)
            for term in self._output[state]:
                yield i - len(term) + 1, i + 1, term

    def terms_in(self, text: str) -> Set[str]:
        """回傳至少出現一次的詞集合"""
        return {term for _start, _end, term in self.iter_spans(text)}
