"""
設定模組

使用者設定可以是單一物件或物件陣列（ESLint flat config 風格）。
在邊界上一律正規化為有序的 ConfigBlock 串列，核心不需要知道這個差異。

使用方式:
    from twlint.config import normalize_config

    config = normalize_config([
        {"ignores": ["**/draft-*.md"]},
        {"files": ["**/*.md"], "domains": ["software-development"]},
        {"files": ["tests/**"], "rules": {"mainland-terms": "off"}},
    ])
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .utils.errors import ConfigError
from .utils.logger import get_logger, setup_logger

SIMPLIFIED_CHARS_RULE = "simplified-chars"
MAINLAND_TERMS_RULE = "mainland-terms"
FILE_READ_ERROR_RULE = "file-read-error"
FILE_WRITE_ERROR_RULE = "file-write-error"

SEVERITY_LEVELS = ("error", "warning", "info", "off")

DEFAULT_RULES: Dict[str, str] = {
    SIMPLIFIED_CHARS_RULE: "error",
    MAINLAND_TERMS_RULE: "warning",
}
DEFAULT_DICTIONARIES: List[str] = ["core"]

_BLOCK_KEYS = {"files", "ignores", "rules", "domains", "dictionaries"}

_logger = get_logger("config")


def configure_logging(verbose: bool = False) -> None:
    """
    根據 verbose 設定配置 logging

    verbose=False 時不主動設定，讓使用者透過標準 logging 控制。
    """
    if verbose:
        setup_logger(level=logging.DEBUG)


@dataclass
class ConfigBlock:
    """
    一個設定區塊

    Attributes:
        files: 套用的檔案 glob；None 表示所有檔案
        ignores: 排除的檔案 glob
        rules: 規則名稱 -> 嚴重度 ("error" | "warning" | "info" | "off")
        domains: 領域詞庫
        dictionaries: 詞庫（舊寫法，domains 未設定時使用）
    """
    files: Optional[List[str]] = None
    ignores: Optional[List[str]] = None
    rules: Optional[Dict[str, str]] = None
    domains: Optional[List[str]] = None
    dictionaries: Optional[List[str]] = None

    @property
    def is_global_ignore(self) -> bool:
        """只有 ignores（沒有 files / rules）的區塊視為全域忽略"""
        return bool(self.ignores) and self.files is None and self.rules is None

    @property
    def dictionary_names(self) -> List[str]:
        return list(self.domains or self.dictionaries or [])


@dataclass
class LinterConfig:
    blocks: List[ConfigBlock] = field(default_factory=list)
    deep: bool = False
    verbose: bool = False

    def __post_init__(self):
        configure_logging(self.verbose)


def default_block() -> ConfigBlock:
    return ConfigBlock(rules=dict(DEFAULT_RULES), dictionaries=list(DEFAULT_DICTIONARIES))


def _string_list(value: Any, key: str) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f'"{key}" must be a string or a list of strings')
    return list(value)


def _rules(value: Any) -> Optional[Dict[str, str]]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ConfigError('"rules" must be a mapping of rule name to severity')
    rules: Dict[str, str] = {}
    for name, severity in value.items():
        if severity not in SEVERITY_LEVELS:
            raise ConfigError(
                f'Invalid severity {severity!r} for rule "{name}" '
                f"(expected one of {', '.join(SEVERITY_LEVELS)})"
            )
        rules[str(name)] = severity
    return rules


def parse_block(raw: Any) -> ConfigBlock:
    if isinstance(raw, ConfigBlock):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Config block must be a mapping, got {type(raw).__name__}")

    unknown = set(raw) - _BLOCK_KEYS
    if unknown:
        _logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

    return ConfigBlock(
        files=_string_list(raw.get("files"), "files"),
        ignores=_string_list(raw.get("ignores"), "ignores"),
        rules=_rules(raw.get("rules")),
        domains=_string_list(raw.get("domains"), "domains"),
        dictionaries=_string_list(raw.get("dictionaries"), "dictionaries"),
    )


def normalize_config(raw: Any = None, *, deep: bool = False, verbose: bool = False) -> LinterConfig:
    """
    將使用者設定正規化

    預設區塊永遠排在最前面，使用者區塊依序排在後面並可覆寫它。
    """
    if isinstance(raw, LinterConfig):
        return raw

    if raw is None:
        user_blocks: Sequence[Any] = []
    elif isinstance(raw, (ConfigBlock, Mapping)):
        user_blocks = [raw]
    elif isinstance(raw, (list, tuple)):
        user_blocks = raw
    else:
        raise ConfigError(f"Config must be a mapping or a list of mappings, got {type(raw).__name__}")

    blocks = [default_block()] + [parse_block(block) for block in user_blocks]
    return LinterConfig(blocks=blocks, deep=deep, verbose=verbose)
