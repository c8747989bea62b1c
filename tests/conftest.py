"""
測試共用工具

- CharMapConverter: 以固定字元表做簡轉繁，讓測試不依賴真實轉換表
- make_dict: 由 {詞: 替換 或 DictLookupEntry} 建立記憶體詞庫
- write_dict: 把已編譯詞庫寫成 JSON 檔
"""

import json

import pytest

from twlint.core.dictionary import CompiledDictionary
from twlint.core.dictionary_manager import DictionaryManager
from twlint.core.types import DictLookupEntry

SIMPLIFIED_TO_TRADITIONAL = {
    "这": "這", "简": "簡", "体": "體", "软": "軟", "开": "開", "发": "發",
    "网": "網", "络": "絡", "个": "個", "电": "電", "脑": "腦", "数": "數",
    "据": "據", "库": "庫", "对": "對", "设": "設", "计": "計", "们": "們",
    "机": "機", "务": "務", "为": "為", "学": "學", "习": "習", "时": "時",
    "间": "間", "会": "會", "门": "門", "质": "質", "类": "類", "别": "別",
    "视": "視", "频": "頻", "认": "認", "连": "連", "运": "運", "动": "動",
    "产": "產", "试": "試", "说": "說", "话": "話", "来": "來",
}


class CharMapConverter:
    """逐字 1:1 的假轉換器"""

    def __init__(self, mapping=None):
        self._table = str.maketrans(mapping or SIMPLIFIED_TO_TRADITIONAL)
        self.calls = 0

    def __call__(self, text: str) -> str:
        self.calls += 1
        return text.translate(self._table)


def _entry(value) -> DictLookupEntry:
    if isinstance(value, DictLookupEntry):
        return value
    return DictLookupEntry(replacement=value, autofix_safe=True)


@pytest.fixture
def converter():
    return CharMapConverter()


@pytest.fixture
def make_dict():
    def factory(name, lookup, version="1.0.0"):
        return CompiledDictionary(
            name=name,
            lookup={term: _entry(value) for term, value in lookup.items()},
            version=version,
        )

    return factory


@pytest.fixture
def write_dict(tmp_path):
    def factory(name, lookup):
        data = {
            "metadata": {"name": name, "version": "1.0.0", "entries": len(lookup)},
            "lookup": {
                term: _entry(value).to_dict()
                for term, value in lookup.items()
            },
        }
        path = tmp_path / f"{name}.json"
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path

    return factory


@pytest.fixture
def manager(tmp_path):
    """以空的暫存目錄為詞庫目錄，避免讀到套件內建詞庫"""
    return DictionaryManager(dictionaries_path=tmp_path)
