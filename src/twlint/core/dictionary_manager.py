"""
詞庫管理與比對引擎

職責:
- 依名稱延遲載入已編譯詞庫（JSON），以有界 LRU 快取
- find_text(): 對所有（或指定的）詞庫執行比對策略，收集候選，
  消解重疊，輸出不重疊、依位置排序的 MatchResult

使用方式:
    manager = DictionaryManager()
    manager.load_dictionaries(["core", "software-development"])
    matches = manager.find_text("軟件開發需要網絡連接")
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from twlint.utils.aho_corasick import TermAutomaton
from twlint.utils.errors import DictionaryLoadError, format_error
from twlint.utils.logger import TimingContext, get_logger
from twlint.utils.lru_cache import LRUCache

from .dictionary import CompiledDictionary
from .events import LintEventHandler
from .matching.resolver import resolve_overlaps
from .matching.strategies import get_strategy
from .types import DictLookupEntry, MatchResult, MatchStrategyType

DEFAULT_DICTIONARIES_PATH = Path(__file__).resolve().parent.parent / "dictionaries"
DEFAULT_CACHE_SIZE = 20
INDEX_FILE = "index.json"


class DictionaryManager:
    """
    詞庫管理器

    Args:
        dictionaries_path: 已編譯詞庫所在目錄，預設為套件內建詞庫
        cache_size: LRU 快取容量
        on_event: 降級事件回呼（詞庫載入失敗）
    """

    def __init__(
        self,
        dictionaries_path: Optional[Union[str, Path]] = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
        on_event: Optional[LintEventHandler] = None,
    ):
        self._logger = get_logger("dictionary")
        self.dictionaries_path = Path(dictionaries_path) if dictionaries_path else DEFAULT_DICTIONARIES_PATH
        self._cache: LRUCache[str, CompiledDictionary] = LRUCache(maxsize=cache_size, on_evict=self._on_evict)
        self._automata: Dict[int, TermAutomaton] = {}
        self._load_order: List[str] = []
        self._on_event = on_event

    # ------------------------------------------------------------------
    # 載入與快取
    # ------------------------------------------------------------------

    def _on_evict(self, name: str, dictionary: CompiledDictionary) -> None:
        self._automata.pop(id(dictionary), None)
        if name in self._load_order:
            self._load_order.remove(name)
        self._logger.debug(f"Evicted dictionary '{name}' from cache")

    def _remember(self, dictionary: CompiledDictionary) -> None:
        name = dictionary.name
        previous = self._cache.peek(name)
        if previous is not None and previous is not dictionary:
            self._automata.pop(id(previous), None)
        self._cache.set(name, dictionary)
        if name not in self._load_order:
            self._load_order.append(name)

    def load_dictionary(self, name: str) -> CompiledDictionary:
        """載入單一詞庫；已快取則直接回傳同一物件"""
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        path = self.dictionaries_path / f"{name}.json"
        with TimingContext(f"load_dictionary({name})", self._logger):
            dictionary = CompiledDictionary.from_file(path, name=name)

        self._remember(dictionary)
        self._logger.debug(f"Loaded dictionary '{name}' ({len(dictionary)} entries)")
        return dictionary

    def load_dictionaries(self, names: Iterable[str]) -> List[CompiledDictionary]:
        """
        依序載入多個詞庫

        單一詞庫失敗只記錄 warning 並略過，不影響其餘詞庫。
        """
        loaded: List[CompiledDictionary] = []
        for name in names:
            try:
                loaded.append(self.load_dictionary(name))
            except DictionaryLoadError as exc:
                self._logger.warning(format_error(exc))
                self._emit(
                    {
                        "type": "dictionary_error",
                        "dictionary": name,
                        "exception_type": type(exc).__name__,
                        "exception_message": format_error(exc),
                    }
                )
        return loaded

    def register_dictionary(self, dictionary: CompiledDictionary) -> None:
        """直接放入記憶體中的詞庫（不經檔案）"""
        self._remember(dictionary)

    def is_loaded(self, name: str) -> bool:
        return name in self._cache

    @property
    def loaded_dictionaries(self) -> List[str]:
        """目前快取中的詞庫名稱，依載入順序"""
        return [name for name in self._load_order if name in self._cache]

    def scan_available_dictionaries(self) -> List[str]:
        """掃描詞庫目錄，列出可載入的詞庫名稱"""
        if not self.dictionaries_path.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.dictionaries_path.glob("*.json")
            if path.name != INDEX_FILE
        )

    def clear_cache(self) -> None:
        self._cache.clear()
        self._automata.clear()
        self._load_order.clear()

    def cache_stats(self) -> Dict[str, float]:
        return self._cache.stats()

    def _emit(self, event) -> None:
        try:
            if self._on_event is not None:
                self._on_event(event)
        except Exception:
            self._logger.exception("on_event 回呼執行失敗")

    # ------------------------------------------------------------------
    # 比對
    # ------------------------------------------------------------------

    def _resolve_dictionaries(self, names: Optional[Sequence[str]]) -> List[CompiledDictionary]:
        if names is None:
            return [d for d in (self._cache.get(n) for n in self.loaded_dictionaries) if d is not None]
        return self.load_dictionaries(names)

    def _automaton_for(self, dictionary: CompiledDictionary) -> TermAutomaton:
        automaton = self._automata.get(id(dictionary))
        if automaton is None:
            automaton = TermAutomaton(dictionary.scan_terms)
            automaton.build()
            self._automata[id(dictionary)] = automaton
        return automaton

    @staticmethod
    def _results_for(
        dictionary: CompiledDictionary,
        text: str,
        term: str,
        entry: DictLookupEntry,
    ) -> List[MatchResult]:
        strategy = get_strategy(entry.match_strategy)
        rule = f"{dictionary.name}-{strategy.kind.value}"
        return [
            MatchResult(
                term=candidate.term,
                replacement=entry.replacement,
                start=candidate.start,
                end=candidate.end,
                confidence=entry.confidence,
                rule=rule,
                strategy=strategy.kind,
                autofix_safe=entry.autofix_safe,
            )
            for candidate in strategy.match(text, term, entry.context)
        ]

    def collect_candidates(self, text: str, dictionaries: Sequence[CompiledDictionary]) -> List[MatchResult]:
        """
        產生完整候選池（尚未消解重疊）

        順序固定：詞庫載入順序 → 詞庫內鍵順序 → 出現位置；
        同一位置、同一替換的重複候選只保留 (confidence, autofix_safe) 最高者，
        並佔用第一次出現的位置。
        """
        pool: List[MatchResult] = []
        index: Dict[tuple, int] = {}

        def add(results: List[MatchResult]) -> None:
            for result in results:
                key = (result.start, result.end, result.replacement)
                slot = index.get(key)
                if slot is None:
                    index[key] = len(pool)
                    pool.append(result)
                elif (result.confidence, result.autofix_safe) > (pool[slot].confidence, pool[slot].autofix_safe):
                    pool[slot] = result

        for dictionary in dictionaries:
            present = self._automaton_for(dictionary).terms_in(text)
            if not present:
                continue
            for term, entry in dictionary.items():
                if term not in present:
                    continue
                add(self._results_for(dictionary, text, term, entry))

                if entry.match_strategy is MatchStrategyType.CONTEXT_SENSITIVE:
                    for _key, variant in dictionary.variants_of(term):
                        add(self._results_for(dictionary, text, term, variant))

        return pool

    def find_text(self, text: str, dictionaries: Optional[Sequence[str]] = None) -> List[MatchResult]:
        """
        在文本中找出所有詞庫命中

        Args:
            text: 待檢查文本
            dictionaries: 要使用的詞庫名稱；None 表示所有已載入詞庫

        Returns:
            不重疊、依起點排序的比對結果（包含 term == replacement 的佔位結果）
        """
        if not text:
            return []

        with TimingContext("DictionaryManager.find_text", self._logger, logging.DEBUG):
            active = self._resolve_dictionaries(dictionaries)
            pool = self.collect_candidates(text, active)
            return resolve_overlaps(pool, len(text))
