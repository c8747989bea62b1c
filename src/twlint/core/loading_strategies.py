"""
詞庫載入策略

決定一個檔案需要哪些詞庫：
- CoreDictStrategy: 只用 core
- CustomDictStrategy: 使用者指定的詞庫清單
- DomainDictStrategy: 指定領域，永遠包含 core（放在最前面）
- DeepDictStrategy: 在上述任一策略之外，再加上目錄中所有可用詞庫
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from twlint.core.dictionary_manager import DictionaryManager

CORE_DICTIONARY = "core"


def _dedupe(names: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(names))


class DictLoadStrategy(ABC):
    @abstractmethod
    def get_dictionaries(self, manager: "DictionaryManager") -> List[str]:
        pass


class CoreDictStrategy(DictLoadStrategy):
    def get_dictionaries(self, manager):
        return [CORE_DICTIONARY]


class CustomDictStrategy(DictLoadStrategy):
    def __init__(self, dictionaries: Sequence[str]):
        self.dictionaries = _dedupe(dictionaries)

    def get_dictionaries(self, manager):
        return list(self.dictionaries)


class DomainDictStrategy(DictLoadStrategy):
    def __init__(self, domains: Sequence[str]):
        self.domains = _dedupe(domains)

    def get_dictionaries(self, manager):
        names = list(self.domains)
        if CORE_DICTIONARY not in names:
            names.insert(0, CORE_DICTIONARY)
        return names


class DeepDictStrategy(DictLoadStrategy):
    def __init__(self, base: DictLoadStrategy):
        self.base = base

    def get_dictionaries(self, manager):
        return _dedupe(self.base.get_dictionaries(manager) + manager.scan_available_dictionaries())


class DictLoadStrategyFactory:
    """依設定選擇策略：domains 優先於 dictionaries，皆無則只用 core"""

    @staticmethod
    def create(
        domains: Optional[Sequence[str]] = None,
        dictionaries: Optional[Sequence[str]] = None,
        deep: bool = False,
    ) -> DictLoadStrategy:
        if domains:
            strategy: DictLoadStrategy = DomainDictStrategy(domains)
        elif dictionaries:
            strategy = CustomDictStrategy(dictionaries)
        else:
            strategy = CoreDictStrategy()

        if deep:
            return DeepDictStrategy(strategy)
        return strategy
