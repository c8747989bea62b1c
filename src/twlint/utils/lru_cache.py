"""
有界 LRU 快取

詞庫快取使用：超過容量時淘汰最久未使用的項目，避免掃描大量檔案時
記憶體無限成長。附帶命中/未命中統計，方便觀察快取效果。

用法：
    cache: LRUCache[str, CompiledDictionary] = LRUCache(maxsize=20)
    cache.set("core", core_dict)
    cache.get("core")
    cache.stats()  # {"hits": 1, "misses": 0, "evictions": 0, ...}
"""

from collections import OrderedDict
from typing import Callable, Dict, Generic, Iterator, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    def __init__(self, maxsize: int = 20, on_evict: Optional[Callable[[K, V], None]] = None):
        if maxsize < 1:
            raise ValueError(f"maxsize must be >= 1, got {maxsize}")
        self.maxsize = maxsize
        self._data: "OrderedDict[K, V]" = OrderedDict()
        self._on_evict = on_evict
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: K) -> Optional[V]:
        """取得值並標記為最近使用；不存在時回傳 None"""
        if key not in self._data:
            self._misses += 1
            return None
        self._hits += 1
        self._data.move_to_end(key)
        return self._data[key]

    def peek(self, key: K) -> Optional[V]:
        """取得值但不影響 LRU 順序與統計"""
        return self._data.get(key)

    def set(self, key: K, value: V) -> None:
        if key in self._data:
            self._data.move_to_end(key)
            self._data[key] = value
            return

        if len(self._data) >= self.maxsize:
            old_key, old_value = self._data.popitem(last=False)
            self._evictions += 1
            if self._on_evict is not None:
                self._on_evict(old_key, old_value)

        self._data[key] = value

    def delete(self, key: K) -> bool:
        return self._data.pop(key, None) is not None

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> Iterator[K]:
        return iter(list(self._data.keys()))

    def values(self) -> Iterator[V]:
        return iter(list(self._data.values()))

    def __contains__(self, key: object) -> bool:
        # 不影響 LRU 順序與統計
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def stats(self) -> Dict[str, float]:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": self._hits / total if total > 0 else 0.0,
            "size": len(self._data),
            "maxsize": self.maxsize,
        }

    def reset_stats(self) -> None:
        self._hits = 0
        self._misses = 0
        self._evictions = 0
