"""
簡轉繁轉換器

核心只依賴一個能力：convert(text) -> text，且必須逐字 1:1 並保留換行，
位置對照才成立。預設實作使用 OpenCC 的 s2tw 設定（延遲載入）；測試可注入
任何同介面的可呼叫物件。

繁簡共用字（例如「台」「面」「后」）本身已是合法的繁體寫法，預設轉換器
一律保留原字，乾淨的繁體文字轉換後必須與原文相同。
"""

from importlib import resources
from typing import Callable, FrozenSet, Optional

from twlint.utils.logger import get_logger

Converter = Callable[[str], str]

INSTALL_HINT = (
    "缺少簡繁轉換依賴。請執行:\n"
    "  pip install opencc-python-reimplemented"
)

OPENCC_CONFIG = "s2tw"
CHARACTER_TABLE = "STCharacters.txt"

_opencc = None
_shared_characters: Optional[FrozenSet[str]] = None


def _get_opencc():
    """延遲載入 opencc 模組"""
    global _opencc

    if _opencc is not None:
        return _opencc

    try:
        import opencc
    except ImportError as exc:
        raise ImportError(INSTALL_HINT) from exc

    _opencc = opencc
    return _opencc


def _load_shared_characters() -> FrozenSet[str]:
    """
    讀取 OpenCC 單字表，找出繁簡共用字

    STCharacters.txt 每行為「簡體字<TAB>候選繁體字（以空白分隔）」；
    候選清單包含字本身者即為繁簡共用字。
    """
    global _shared_characters

    if _shared_characters is not None:
        return _shared_characters

    table = resources.files(_get_opencc()) / "dictionary" / CHARACTER_TABLE
    shared = set()
    with table.open(encoding="utf-8") as f:
        for line in f:
            key, _, candidates = line.rstrip("\n").partition("\t")
            if key in candidates.split():
                shared.add(key)

    _shared_characters = frozenset(shared)
    return _shared_characters


class OpenCCConverter:
    """
    以 OpenCC 實作的簡體 → 臺灣繁體轉換

    Args:
        config: OpenCC 設定名稱，預設 s2tw（字形轉換，不改寫詞彙）
        keep_shared: 是否保留繁簡共用字原樣
    """

    def __init__(self, config: str = OPENCC_CONFIG, keep_shared: bool = True):
        self._logger = get_logger("converter")
        self._opencc = _get_opencc().OpenCC(config)
        self._shared = _load_shared_characters() if keep_shared else frozenset()

    def __call__(self, text: str) -> str:
        if not text:
            return text
        converted = self._opencc.convert(text)
        if len(converted) != len(text):
            self._logger.debug(
                f"Conversion changed text length ({len(text)} -> {len(converted)}); "
                "positions are approximate"
            )
            return converted
        if not self._shared:
            return converted
        return "".join(
            original if original in self._shared else char
            for original, char in zip(text, converted)
        )


_default_converter: Optional[OpenCCConverter] = None


def get_default_converter() -> Converter:
    global _default_converter
    if _default_converter is None:
        _default_converter = OpenCCConverter()
    return _default_converter
