"""
設定區塊比對：判斷檔案要套用哪些規則與詞庫

優先順序:
1. 系統忽略（SYSTEM_IGNORES）：版本控制、相依套件、建構輸出、環境變數檔等，
   任何使用者設定都無法覆寫
2. .twlintignore 的模式
3. 全域忽略區塊（只有 ignores 的區塊）
4. 各區塊依序套用：files 符合（或未設定 files）且不在 ignores 內；
   rules 後面覆寫前面，domains / dictionaries 串接後去重
"""

import os
import re
from typing import Dict, Iterable, List, Optional, Sequence, Set

from wcmatch import glob

from twlint.config import ConfigBlock, LinterConfig, normalize_config
from twlint.utils.logger import get_logger

SYSTEM_IGNORES = (
    # 版本控制
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    # 相依套件
    "**/node_modules/**",
    "**/vendor/**",
    "**/.venv/**",
    "**/venv/**",
    "**/site-packages/**",
    "**/__pycache__/**",
    # 設定與忽略檔
    "**/.*ignore",
    # 環境變數與機密
    "**/.env",
    "**/.env.*",
    "**/.envrc",
    # 系統檔
    "**/.DS_Store",
    "**/Thumbs.db",
    "**/desktop.ini",
    # 編輯器
    "**/.vscode/**",
    "**/.idea/**",
    "**/.vs/**",
    # 建構輸出
    "**/dist/**",
    "**/build/**",
    "**/out/**",
    "**/.next/**",
    "**/.nuxt/**",
    # 日誌與暫存
    "**/*.log",
    "**/*.tmp",
    "**/*.temp",
    "**/logs/**",
)

GLOB_FLAGS = (
    glob.GLOBSTAR
    | glob.DOTGLOB
    | glob.BRACE
    | glob.NEGATE
    | glob.MATCHBASE
    | glob.FORCEUNIX
)

_logger = get_logger("config")
_invalid_patterns: Set[str] = set()


def _normalize_path(file_path: str) -> str:
    """
    統一為 "/" 分隔的相對路徑

    位於目前目錄下的絕對路徑轉為相對路徑，其餘絕對路徑去掉根目錄。
    """
    path = str(file_path)
    if os.path.isabs(path):
        try:
            relative = os.path.relpath(path)
        except ValueError:
            relative = os.pardir
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            path = os.path.splitdrive(path)[1].lstrip("\\/")
        else:
            path = relative
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def _normalize_pattern(pattern: str) -> str:
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    while body.startswith("./"):
        body = body[2:]
    return "!" + body if negated else body


def _globmatch(path: str, patterns: Sequence[str]) -> bool:
    try:
        return glob.globmatch(path, patterns, flags=GLOB_FLAGS)
    except (re.error, ValueError) as exc:
        key = "\0".join(patterns)
        if key not in _invalid_patterns:
            _invalid_patterns.add(key)
            _logger.warning(f"Invalid glob pattern in {list(patterns)}: {exc}")
        return False


def match_glob(file_path: str, pattern: str) -> bool:
    """
    單一 glob 比對

    不含 "/" 的模式只比對檔名（任意深度皆可命中）。
    """
    return _globmatch(_normalize_path(file_path), [_normalize_pattern(pattern)])


def matches_any_pattern(file_path: str, patterns: Iterable[str]) -> bool:
    """至少命中一個正向模式，且沒有被任何 "!" 否定模式排除"""
    patterns = [_normalize_pattern(p) for p in patterns]
    if not patterns:
        return False
    return _globmatch(_normalize_path(file_path), patterns)


class ConfigMatcher:
    """
    設定比對器

    Args:
        config: 使用者設定（任何 normalize_config 接受的形式）
        ignore_patterns: .twlintignore 的模式
    """

    def __init__(self, config=None, ignore_patterns: Optional[Sequence[str]] = None):
        self.config: LinterConfig = normalize_config(config)
        self.ignore_patterns: List[str] = list(ignore_patterns or [])
        self._logger = get_logger("config")

    @property
    def blocks(self) -> List[ConfigBlock]:
        return self.config.blocks

    def is_ignored(self, file_path: str) -> bool:
        if matches_any_pattern(file_path, SYSTEM_IGNORES):
            return True

        if self.ignore_patterns and matches_any_pattern(file_path, self.ignore_patterns):
            return True

        global_ignores = [p for block in self.blocks if block.is_global_ignore for p in block.ignores]
        if global_ignores and matches_any_pattern(file_path, global_ignores):
            return True

        for block in self.blocks:
            if block.is_global_ignore:
                continue
            if block.files is not None and not matches_any_pattern(file_path, block.files):
                continue
            if block.ignores and matches_any_pattern(file_path, block.ignores):
                return True

        return False

    def applicable_blocks(self, file_path: Optional[str]) -> List[ConfigBlock]:
        """
        適用於檔案的區塊（依序）

        file_path 為 None（純文字檢查）時只取未設定 files 的區塊。
        """
        applicable: List[ConfigBlock] = []
        for block in self.blocks:
            if block.is_global_ignore:
                continue
            if file_path is None:
                if block.files is None:
                    applicable.append(block)
                continue
            if block.files is not None and not matches_any_pattern(file_path, block.files):
                continue
            if block.ignores and matches_any_pattern(file_path, block.ignores):
                continue
            applicable.append(block)
        return applicable

    def get_rules_for_file(self, file_path: Optional[str]) -> Dict[str, str]:
        if file_path is not None and self.is_ignored(file_path):
            return {}
        merged: Dict[str, str] = {}
        for block in self.applicable_blocks(file_path):
            if block.rules:
                merged.update(block.rules)
        return merged

    def get_domains_for_file(self, file_path: Optional[str]) -> List[str]:
        if file_path is not None and self.is_ignored(file_path):
            return []
        domains: List[str] = []
        for block in self.applicable_blocks(file_path):
            domains.extend(block.dictionary_names)
        return list(dict.fromkeys(domains))
