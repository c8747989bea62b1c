"""
已編譯詞庫

CompiledDictionary 一經建立即不可變。lookup 的鍵分兩種：
- 主鍵：詞本身（簡體寫法，或與簡體不同時的繁體寫法）
- 變體鍵：「主鍵 + '_' + 限定詞」，讓同一個表面詞可同時掛多個
  依上下文而定的替換（例如 "質量_quality" / "質量_mass"）

變體鍵不會直接拿去掃描文本；只有在主鍵詞條為 context_sensitive 時，
才以主鍵的文字、變體自己的策略與上下文規則再比對一次。
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from twlint.utils.errors import DictionaryLoadError

from .types import ContextRule, DictLookupEntry, MatchStrategyType

VARIANT_SEPARATOR = "_"
_QUALIFIER_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


class CompiledDictionary:
    """
    已編譯、不可變的詞庫

    Attributes:
        name: 詞庫名稱（例如 "core"、"software-development"）
        version: 詞庫版本字串
        lookup: 詞 -> DictLookupEntry 的唯讀映射
    """

    def __init__(self, name: str, lookup: Mapping[str, DictLookupEntry], version: str = "1.0.0"):
        self._name = name
        self._version = version
        self._lookup: Mapping[str, DictLookupEntry] = MappingProxyType(dict(lookup))
        self._variants, self._scan_terms = self._index_variants(self._lookup)

    @staticmethod
    def _index_variants(
        lookup: Mapping[str, DictLookupEntry]
    ) -> Tuple[Dict[str, Tuple[Tuple[str, DictLookupEntry], ...]], Tuple[str, ...]]:
        variants: Dict[str, List[Tuple[str, DictLookupEntry]]] = {}
        scan_terms: List[str] = []
        for key, entry in lookup.items():
            base = _variant_base(key, lookup)
            if base is None:
                scan_terms.append(key)
            else:
                variants.setdefault(base, []).append((key, entry))
        return {k: tuple(v) for k, v in variants.items()}, tuple(scan_terms)

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def lookup(self) -> Mapping[str, DictLookupEntry]:
        return self._lookup

    @property
    def scan_terms(self) -> Tuple[str, ...]:
        """會直接拿去掃描的主鍵（不含變體鍵），保持 lookup 原順序"""
        return self._scan_terms

    def variants_of(self, term: str) -> Tuple[Tuple[str, DictLookupEntry], ...]:
        return self._variants.get(term, ())

    def items(self) -> Iterator[Tuple[str, DictLookupEntry]]:
        for term in self._scan_terms:
            yield term, self._lookup[term]

    def __len__(self) -> int:
        return len(self._lookup)

    def __contains__(self, term: object) -> bool:
        return term in self._lookup

    def __repr__(self) -> str:
        return f"CompiledDictionary(name={self._name!r}, version={self._version!r}, entries={len(self)})"

    # ------------------------------------------------------------------
    # 序列化
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Any, name: Optional[str] = None) -> "CompiledDictionary":
        """
        由已編譯 JSON 結構建立

        格式:
            {"metadata": {"name", "version", "entries"},
             "lookup": {term: {"taiwan", "confidence", "match_type", ...}}}
        """
        label = name or "<unknown>"
        if not isinstance(data, dict):
            raise DictionaryLoadError(label, "top-level value must be an object")

        metadata = data.get("metadata") or {}
        raw_lookup = data.get("lookup")
        if not isinstance(raw_lookup, dict):
            raise DictionaryLoadError(label, 'missing "lookup" object')

        lookup: Dict[str, DictLookupEntry] = {}
        for term, raw in raw_lookup.items():
            if not term:
                continue
            try:
                lookup[term] = DictLookupEntry.from_dict(raw)
            except (KeyError, TypeError, ValueError) as exc:
                raise DictionaryLoadError(label, f"invalid entry {term!r}: {exc}") from exc

        return cls(
            name=name or metadata.get("name") or label,
            lookup=lookup,
            version=str(metadata.get("version", "1.0.0")),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path], name: Optional[str] = None) -> "CompiledDictionary":
        path = Path(path)
        label = name or path.stem
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DictionaryLoadError(label, exc.strerror or str(exc)) from exc
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise DictionaryLoadError(label, f"invalid JSON: {exc}") from exc
        return cls.from_dict(data, name=label)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": {"name": self._name, "version": self._version, "entries": len(self)},
            "lookup": {term: entry.to_dict() for term, entry in self._lookup.items()},
        }


def _variant_base(key: str, lookup: Mapping[str, DictLookupEntry]) -> Optional[str]:
    """若 key 為某主鍵的變體鍵，回傳該主鍵"""
    idx = key.find(VARIANT_SEPARATOR)
    while idx > 0:
        base = key[:idx]
        if idx < len(key) - 1 and base in lookup:
            return base
        idx = key.find(VARIANT_SEPARATOR, idx + 1)
    return None


# =============================================================================
# 由詞條紀錄編譯
# =============================================================================

@dataclass(frozen=True)
class DictEntry:
    """已解析的原始詞條（一列詞庫資料）"""
    id: str
    taiwan: str
    china_simplified: str
    china_traditional: str = ""
    confidence: float = 1.0
    category: str = ""
    reason: str = ""
    domain: str = ""
    match_type: MatchStrategyType = MatchStrategyType.EXACT
    context: Optional[ContextRule] = None
    autofix_safe: bool = False

    def to_lookup_entry(self) -> DictLookupEntry:
        return DictLookupEntry(
            replacement=self.taiwan,
            confidence=self.confidence,
            category=self.category,
            reason=self.reason,
            match_strategy=self.match_type,
            context=self.context,
            autofix_safe=self.autofix_safe,
        )


def variant_key(term: str, entry_id: str) -> str:
    return f"{term}{VARIANT_SEPARATOR}{_QUALIFIER_UNSAFE.sub('_', entry_id)}"


def compile_dictionary(name: str, entries: Iterable[DictEntry], version: str = "1.0.0") -> CompiledDictionary:
    """
    將詞條紀錄編譯為查找表

    規則:
    - 主鍵衝突時 exact 詞條優先，否則先到先得
    - 每個詞條另外登記一個變體鍵，保留所有語境版本
    - 繁體寫法與簡體不同時，以同樣方式再登記一次
    """
    lookup: Dict[str, DictLookupEntry] = {}

    def register(term: str, entry_id: str, data: DictLookupEntry) -> None:
        if term not in lookup or data.match_strategy is MatchStrategyType.EXACT:
            lookup[term] = data
        lookup[variant_key(term, entry_id)] = data

    for entry in entries:
        data = entry.to_lookup_entry()
        register(entry.china_simplified, entry.id, data)
        if entry.china_traditional and entry.china_traditional != entry.china_simplified:
            register(entry.china_traditional, entry.id, data)

    return CompiledDictionary(name=name, lookup=lookup, version=version)
