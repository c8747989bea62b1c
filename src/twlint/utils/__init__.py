"""
工具模組

提供日誌、計時、快取、多詞掃描與錯誤型別等通用工具。
"""

from .aho_corasick import TermAutomaton
from .errors import (
    ConfigError,
    DictionaryLoadError,
    RuleExecutionError,
    TWLintError,
    format_error,
)
from .logger import (
    TimingContext,
    enable_debug_logging,
    get_logger,
    log_timing,
    setup_logger,
)
from .lru_cache import LRUCache

__all__ = [
    # 日誌工具
    "get_logger",
    "setup_logger",
    "enable_debug_logging",
    "log_timing",
    "TimingContext",

    # 資料結構
    "LRUCache",
    "TermAutomaton",

    # 錯誤
    "TWLintError",
    "DictionaryLoadError",
    "RuleExecutionError",
    "ConfigError",
    "format_error",
]
