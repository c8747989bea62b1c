"""
重疊消解測試

長度優先、信心度次之、起點再次之；bitmap 與 intervals 兩種實作結果必須一致。
"""

import random

import pytest

from twlint.core.matching import resolver
from twlint.core.matching.resolver import resolve_overlaps
from twlint.core.types import MatchResult


def mr(term, start, confidence=0.9, replacement=None, rule="test-exact"):
    return MatchResult(
        term=term,
        replacement=replacement if replacement is not None else term.lower(),
        start=start,
        end=start + len(term),
        confidence=confidence,
        rule=rule,
    )


def spans(matches):
    return [(m.start, m.end) for m in matches]


class TestPriority:
    """排序與取捨規則"""

    def test_longer_wins_partial_overlap(self):
        """測試 ABCDE 中 BCDE（4 字）勝過 ABC（3 字）"""
        abc = mr("ABC", 0)
        bcde = mr("BCDE", 1)
        for pool in ([abc, bcde], [bcde, abc]):
            assert resolve_overlaps(pool, 5) == [bcde]

    def test_longest_nested_wins(self):
        """測試 個人電腦 同時擋住 電腦 與 電"""
        pool = [mr("電", 6), mr("電腦", 6), mr("個人電腦", 4)]
        assert [m.term for m in resolve_overlaps(pool, 8)] == ["個人電腦"]

    def test_confidence_breaks_length_tie(self):
        """測試等長重疊時信心度高者勝出"""
        low = mr("AB", 0, confidence=0.8)
        high = mr("BC", 1, confidence=0.95)
        assert resolve_overlaps([low, high]) == [high]

    def test_same_span_resolved_by_confidence(self):
        """測試同一區間、不同替換時依信心度而非加入順序"""
        first = mr("軟件", 0, confidence=0.6, replacement="軟件體")
        second = mr("軟件", 0, confidence=0.9, replacement="軟體")
        assert resolve_overlaps([first, second]) == [second]

    def test_start_breaks_full_tie(self):
        """測試長度與信心度都相同時起點較前者勝出"""
        later = mr("BC", 1)
        earlier = mr("AB", 0)
        assert resolve_overlaps([later, earlier]) == [earlier]

    def test_exact_duplicates_keep_first(self):
        """測試完全相同的候選保留先加入者"""
        first = mr("AB", 0, rule="first-exact")
        second = mr("AB", 0, rule="second-exact")
        assert resolve_overlaps([first, second])[0].rule == "first-exact"

    def test_adjacent_matches_survive(self):
        """測試相鄰不重疊的候選都會保留，並依位置排序"""
        a = mr("算法", 0)
        b = mr("設計", 2)
        assert resolve_overlaps([b, a]) == [a, b]

    def test_identity_occupies_span(self):
        """測試 term == replacement 的結果同樣佔用區間"""
        identity = mr("演算法", 0, confidence=1.0, replacement="演算法")
        shorter = mr("算法", 1, confidence=0.8, replacement="演算法")
        result = resolve_overlaps([shorter, identity])
        assert result == [identity]
        assert result[0].is_identity


class TestEdgeCases:
    """邊界情況"""

    def test_empty_pool(self):
        """測試空候選池"""
        assert resolve_overlaps([]) == []

    def test_zero_length_candidates_dropped(self):
        """測試長度為 0 的候選被忽略"""
        empty = MatchResult(term="", replacement="x", start=0, end=0, confidence=1.0, rule="r")
        assert resolve_overlaps([empty]) == []

    def test_text_length_smaller_than_spans(self):
        """測試給定長度不足時仍以候選範圍為準"""
        assert spans(resolve_overlaps([mr("ABC", 3)], text_length=2)) == [(3, 6)]

    def test_unknown_method(self):
        """測試未知的選擇方法"""
        with pytest.raises(ValueError):
            resolve_overlaps([mr("A", 0)], method="quadratic")

    def test_large_text_uses_intervals(self, monkeypatch):
        """測試超過門檻時改用區間串列"""
        monkeypatch.setattr(resolver, "BITMAP_MAX_TEXT_LENGTH", 3)

        def fail(*_args):
            raise AssertionError("bitmap should not be used")

        monkeypatch.setattr(resolver, "_select_with_bitmap", fail)
        assert spans(resolve_overlaps([mr("ABC", 0), mr("CD", 2)], 10)) == [(0, 3)]


class TestImplementationsAgree:
    """bitmap 與 intervals 結果一致，且永不重疊"""

    @staticmethod
    def random_pool(seed, size=300, text_length=200):
        rng = random.Random(seed)
        pool = []
        for _ in range(size):
            start = rng.randrange(text_length)
            length = rng.randint(1, 6)
            pool.append(
                MatchResult(
                    term="x" * length,
                    replacement="y",
                    start=start,
                    end=min(text_length, start + length),
                    confidence=rng.choice([0.7, 0.8, 0.9, 1.0]),
                    rule="random-exact",
                )
            )
        return pool

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_bitmap_equals_intervals(self, seed):
        """測試兩種實作接受完全相同的集合"""
        pool = self.random_pool(seed)
        bitmap = resolve_overlaps(pool, 200, method="bitmap")
        intervals = resolve_overlaps(pool, 200, method="intervals")
        assert bitmap == intervals

    @pytest.mark.parametrize("seed", [3, 11])
    def test_no_two_results_overlap(self, seed):
        """測試結果兩兩不重疊且依起點排序"""
        result = resolve_overlaps(self.random_pool(seed), 200)
        for i, a in enumerate(result):
            for b in result[i + 1:]:
                assert not a.overlaps(b)
        assert [m.start for m in result] == sorted(m.start for m in result)
